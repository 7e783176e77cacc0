"""ToolCatalog — derives tool definitions from the live route table."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from typing import Any

from starlette.routing import BaseRoute, Route

from routemcp.errors import ToolNameCollisionError
from routemcp.mcp.metadata import ToolMetadataStore
from routemcp.mcp.models import ToolDefinition
from routemcp.mcp.naming import tool_name_from_route
from routemcp.mcp.schema import declared_query_params, infer_schema

logger = logging.getLogger(__name__)

SKIPPED_METHODS = frozenset({"HEAD", "OPTIONS"})
_METHOD_ORDER = ("GET", "POST", "PUT", "PATCH", "DELETE")
_CATCH_ALL_RE = re.compile(r"\{\w+:path\}$")

RouteSource = Callable[[], Iterable[BaseRoute]]


@dataclass(frozen=True)
class RouteOperation:
    """One method of a route, addressed by its full path (mount base included)."""

    method: str
    path: str
    route: Route

    @property
    def endpoint(self) -> Callable[..., Any]:
        return self.route.endpoint


def is_addressable(route: BaseRoute) -> bool:
    """Whether *route* can stand for tools at all.

    Mounts, websocket routes, all-method routes, catch-all ``{name:path}``
    routes and routes hidden from the API schema are not tools.
    """
    if not isinstance(route, Route) or route.methods is None:
        return False
    if not route.include_in_schema:
        return False
    return not _CATCH_ALL_RE.search(route.path)


def route_methods(route: Route) -> list[str]:
    """Methods of *route* that become tools, in a stable order."""
    methods = [method for method in route.methods or () if method not in SKIPPED_METHODS]

    def rank(method: str) -> tuple[int, str]:
        if method in _METHOD_ORDER:
            return _METHOD_ORDER.index(method), method
        return len(_METHOD_ORDER), method

    return sorted(methods, key=rank)


class ToolCatalog:
    """Derives tool definitions on demand.

    Holds no state of its own: every call reads the route table through
    *routes* and the overrides through *metadata*, so routes registered after
    construction are listed and callable immediately.  A route answering
    several methods yields one tool per method.

    Two operations deriving the same name are both listed and ``find_route``
    binds the first; the duplicate is logged.  With ``strict_names`` the
    listing raises :class:`ToolNameCollisionError` instead.
    """

    def __init__(
        self,
        routes: RouteSource,
        metadata: ToolMetadataStore,
        *,
        base: str = "",
        strict_names: bool = False,
    ) -> None:
        self._routes = routes
        self._metadata = metadata
        self._base = base
        self._strict_names = strict_names

    def operations(self) -> Iterator[RouteOperation]:
        for route in self._routes():
            if not isinstance(route, Route) or not is_addressable(route):
                continue
            for method in route_methods(route):
                yield RouteOperation(method, f"{self._base}{route.path}", route)

    def tool_name(self, operation: RouteOperation) -> str:
        return tool_name_from_route(operation.method, operation.path, self._base)

    def build_definition(self, operation: RouteOperation) -> ToolDefinition:
        method, path = operation.method, operation.path
        meta = self._metadata.get(method, path)
        schema = infer_schema(
            method,
            path,
            [operation.endpoint],
            meta,
            declared=declared_query_params(operation.route),
        )
        description = (meta.description if meta else None) or f"{method} {path}"
        return ToolDefinition(
            name=self.tool_name(operation),
            description=description,
            input_schema=schema,
        )

    def list_tools(self) -> list[ToolDefinition]:
        """Return one definition per addressable operation, in route-table order."""
        tools: list[ToolDefinition] = []
        owners: dict[str, list[str]] = {}
        for operation in self.operations():
            tool = self.build_definition(operation)
            owners.setdefault(tool.name, []).append(f"{operation.method} {operation.path}")
            tools.append(tool)

        for name, paths in owners.items():
            if len(paths) < 2:
                continue
            if self._strict_names:
                raise ToolNameCollisionError(name, paths)
            logger.warning(
                "Tool name %s is derived by %d routes (%s); calls bind to the first",
                name,
                len(paths),
                ", ".join(paths),
            )
        return tools

    def find_route(self, name: str) -> RouteOperation | None:
        """Return the first addressable operation deriving *name*."""
        for operation in self.operations():
            if self.tool_name(operation) == name:
                return operation
        return None
