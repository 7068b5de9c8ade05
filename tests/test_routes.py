"""Tests for reversible route registration."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from pagewith.routes import RoutePatchManager


def add_route(path: str, body: str):
    def register(app: FastAPI) -> None:
        @app.get(path)
        async def handler():
            return {"body": body}

    return register


class TestRoutePatchManager:
    """Tests for RoutePatchManager."""

    def test_apply_and_remove(self) -> None:
        app = FastAPI()
        routes = RoutePatchManager(app)
        before = routes.route_count

        remove = routes.apply_patch(add_route("/user", "john"))

        assert routes.route_count == before + 1
        assert TestClient(app).get("/user").json() == {"body": "john"}

        remove()

        assert routes.route_count == before
        assert TestClient(app).get("/user").status_code == 404

    def test_out_of_order_removal(self) -> None:
        """Test removing an older group keeps routes added after it."""
        app = FastAPI()
        routes = RoutePatchManager(app)

        remove_a = routes.apply_patch(add_route("/a", "a"))
        remove_b = routes.apply_patch(add_route("/b", "b"))
        client = TestClient(app)

        remove_a()

        assert client.get("/a").status_code == 404
        assert client.get("/b").json() == {"body": "b"}
        assert len(routes.active_groups) == 1

        remove_b()

        assert client.get("/b").status_code == 404
        assert routes.active_groups == []

    def test_routes_added_outside_groups_survive(self) -> None:
        app = FastAPI()
        routes = RoutePatchManager(app)

        remove = routes.apply_patch(add_route("/patched", "patched"))
        add_route("/permanent", "permanent")(app)
        remove()

        client = TestClient(app)
        assert client.get("/permanent").json() == {"body": "permanent"}
        assert client.get("/patched").status_code == 404

    def test_group_with_several_routes(self) -> None:
        app = FastAPI()
        routes = RoutePatchManager(app)
        before = routes.route_count

        def register(app: FastAPI) -> None:
            add_route("/one", "1")(app)
            add_route("/two", "2")(app)

        routes.apply_patch(register)
        group = routes.active_groups[0]

        assert len(group.routes) == 2
        assert routes.remove_group(group.group_id) == 2
        assert routes.route_count == before

    def test_failed_registration_leaves_no_routes(self) -> None:
        """Test routes added before a registration error are taken out again."""
        app = FastAPI()
        routes = RoutePatchManager(app)
        before = routes.route_count

        def register(app: FastAPI) -> None:
            add_route("/leak", "leak")(app)
            raise RuntimeError("setup failed")

        with pytest.raises(RuntimeError):
            routes.apply_patch(register)

        assert routes.route_count == before
        assert routes.active_groups == []
        assert TestClient(app).get("/leak").status_code == 404

    def test_double_removal_is_noop(self) -> None:
        app = FastAPI()
        routes = RoutePatchManager(app)
        remove = routes.apply_patch(add_route("/user", "john"))
        count = routes.route_count

        remove()
        remove()

        assert routes.route_count == count - 1
        assert routes.remove_group("unknown") == 0

    def test_remove_all(self) -> None:
        app = FastAPI()
        routes = RoutePatchManager(app)
        before = routes.route_count

        routes.apply_patch(add_route("/a", "a"))
        routes.apply_patch(add_route("/b", "b"))
        routes.remove_all()

        assert routes.route_count == before
        assert routes.active_groups == []
