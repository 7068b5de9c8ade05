"""Reversible registration of extra HTTP routes.

A test registers routes through :meth:`RoutePatchManager.apply_patch` and
gets back a callable that removes exactly those routes again. Routes are
tracked by identity in named groups, so groups can be removed in any order
without touching routes registered by someone else.
"""

import logging
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Callable

from fastapi import FastAPI
from starlette.routing import BaseRoute

logger = logging.getLogger(__name__)

RegisterFn = Callable[[FastAPI], None]


@dataclass
class RouteGroup:
    """Routes added by one registration call.

    Attributes:
        group_id: Stable identifier of the group.
        routes: Route objects the call added, in registration order.
    """

    group_id: str
    routes: list[BaseRoute] = field(default_factory=list)


class RoutePatchManager:
    """Extends a FastAPI app's router with removable route groups."""

    def __init__(self, app: FastAPI) -> None:
        self.app = app
        self._groups: "OrderedDict[str, RouteGroup]" = OrderedDict()

    @property
    def route_count(self) -> int:
        """Number of routes currently in the router."""
        return len(self.app.router.routes)

    @property
    def active_groups(self) -> list[RouteGroup]:
        """Route groups that have not been removed yet, oldest first."""
        return list(self._groups.values())

    def apply_patch(self, register_fn: RegisterFn) -> Callable[[], None]:
        """Run a registration function and record the routes it added.

        Args:
            register_fn: Called with the live app; may add any routes.

        Returns:
            Callable removing exactly the routes ``register_fn`` added.

        Raises:
            Exception: Whatever ``register_fn`` raises. Routes it added before
                failing are removed first.
        """
        routes = self.app.router.routes
        before = {id(route) for route in routes}
        group = RouteGroup(group_id=uuid.uuid4().hex)

        failed = True
        try:
            register_fn(self.app)
            failed = False
        finally:
            group.routes = [route for route in routes if id(route) not in before]
            self._groups[group.group_id] = group
            if failed:
                logger.debug("route registration failed, removing %d routes", len(group.routes))
                self.remove_group(group.group_id)

        logger.debug("applied route group %s (%d routes)", group.group_id, len(group.routes))

        def remove_patch() -> None:
            self.remove_group(group.group_id)

        return remove_patch

    def remove_group(self, group_id: str) -> int:
        """Remove a route group by id.

        Removing an unknown or already removed group does nothing.

        Returns:
            Number of routes removed.
        """
        group = self._groups.pop(group_id, None)
        if group is None:
            return 0

        owned = {id(route) for route in group.routes}
        routes = self.app.router.routes
        kept = [route for route in routes if id(route) not in owned]
        removed = len(routes) - len(kept)
        routes[:] = kept

        logger.debug("removed route group %s (%d routes)", group_id, removed)
        return removed

    def remove_all(self) -> None:
        for group_id in reversed(list(self._groups)):
            self.remove_group(group_id)
