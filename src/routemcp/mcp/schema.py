"""Input schema inference for route-derived tools.

Path placeholders become required string properties, mutating verbs get an
optional ``body`` object, and parameters declared through metadata overrides
are added as optional properties.  Query parameters come from two places:
those a FastAPI endpoint declares in its signature, and, for ``GET``/``DELETE``
routes, a best-effort scan of handler source for
``query_params["name"]``, ``query_params.get("name")`` and
``query_params.getlist("name")``.  The scan misses handlers without
retrievable source or that reach the query indirectly, so declaring
parameters via the signature or ``describe_mcp`` remains the reliable path.
"""

from __future__ import annotations

import inspect
import logging
import re
from collections.abc import Callable, Iterable

from fastapi.dependencies.utils import get_flat_dependant

from routemcp.mcp.models import InputSchema, ParamMeta, PropertySchema, ToolMeta
from routemcp.mcp.naming import path_params

logger = logging.getLogger(__name__)

BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})
QUERY_METHODS = frozenset({"GET", "DELETE"})

DEFAULT_BODY_DESCRIPTION = "Request body"

_QUERY_ACCESS_RE = re.compile(
    r"""\bquery_params(?:
        \.get(?:list)?\(\s*(?P<q1>['"])(?P<called>\w[\w-]*)(?P=q1)
      | \[\s*(?P<q2>['"])(?P<keyed>\w[\w-]*)(?P=q2)\s*\]
    )""",
    re.VERBOSE,
)


def infer_query_params(handlers: Iterable[Callable[..., object]]) -> list[str]:
    """Scan handler source for query-string accessors, in order of appearance."""
    found: dict[str, None] = {}
    for handler in handlers:
        try:
            source = inspect.getsource(inspect.unwrap(handler))
        except (OSError, TypeError):
            logger.debug("No source available for handler %r", handler)
            continue
        for match in _QUERY_ACCESS_RE.finditer(source):
            found[match["called"] or match["keyed"]] = None
    return list(found)


def declared_query_params(route: object) -> list[str]:
    """Query parameters a FastAPI route declares, dependencies included."""
    dependant = getattr(route, "dependant", None)
    if dependant is None:
        return []
    return [field.alias for field in get_flat_dependant(dependant).query_params]


def _property(name: str, params: dict[str, ParamMeta]) -> PropertySchema:
    hint = params.get(name)
    if hint is None:
        return PropertySchema()
    return PropertySchema(type=hint.type or "string", description=hint.description)


def infer_schema(
    method: str,
    path: str,
    handlers: Iterable[Callable[..., object]],
    meta: ToolMeta | None = None,
    *,
    declared: Iterable[str] = (),
) -> InputSchema:
    """Build the input schema for one route.

    Property order: path params, ``body``, *declared* query params, scanned
    query params, then override-only params.  Only path params are required.
    """
    method = method.upper()
    params = meta.params if meta is not None else {}
    properties: dict[str, PropertySchema] = {}
    required: list[str] = []

    for name in path_params(path):
        properties[name] = _property(name, params)
        required.append(name)

    if method in BODY_METHODS:
        body_hint = params.get("body")
        properties["body"] = PropertySchema(
            type="object",
            description=(body_hint.description if body_hint else None)
            or DEFAULT_BODY_DESCRIPTION,
        )

    query = list(declared)
    if method in QUERY_METHODS:
        query += infer_query_params(handlers)
    for name in query:
        if name not in properties:
            properties[name] = _property(name, params)

    for name in params:
        if name not in properties:
            properties[name] = _property(name, params)

    return InputSchema(properties=properties, required=required)
