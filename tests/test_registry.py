"""Tests for the page registry."""

import pytest

from pagewith.exceptions import PageNotFoundError
from pagewith.registry import PageOptions, PageRegistry


class TestPageRegistry:
    """Tests for PageRegistry."""

    def test_create_and_resolve(self) -> None:
        registry = PageRegistry(base_url="http://127.0.0.1:4000")
        handle = registry.create_page("/src/hello.js", PageOptions(title="Hello"))

        assert handle.url == f"http://127.0.0.1:4000/preview/{handle.page_id}"

        context = registry.resolve_page(handle.page_id)
        assert context.entry_path == "/src/hello.js"
        assert context.options.title == "Hello"
        assert context.options.markup is None

    def test_ids_are_unique(self) -> None:
        registry = PageRegistry()
        ids = {registry.create_page("/src/hello.js").page_id for _ in range(50)}

        assert len(ids) == 50
        assert len(registry) == 50

    def test_relative_url_without_base(self) -> None:
        registry = PageRegistry()
        handle = registry.create_page(None)

        assert handle.url == f"/preview/{handle.page_id}"
        assert registry.resolve_page(handle.page_id).entry_path is None

    def test_base_url_trailing_slash(self) -> None:
        registry = PageRegistry(base_url="http://localhost:4000/")
        handle = registry.create_page(None)

        assert handle.url == f"http://localhost:4000/preview/{handle.page_id}"

    def test_unknown_id(self) -> None:
        registry = PageRegistry()

        with pytest.raises(PageNotFoundError) as exc_info:
            registry.resolve_page("nope")

        assert exc_info.value.status_code == 404

    def test_remove_page(self) -> None:
        registry = PageRegistry()
        handle = registry.create_page(None)

        assert registry.remove_page(handle.page_id) is True
        assert handle.page_id not in registry
        assert registry.remove_page(handle.page_id) is False
        with pytest.raises(PageNotFoundError):
            registry.resolve_page(handle.page_id)
