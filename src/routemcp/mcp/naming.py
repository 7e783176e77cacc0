"""Tool name derivation from route method and path.

Paths use the route table's placeholder syntax: ``{name}`` or, with a
convertor, ``{name:int}``.
"""

from __future__ import annotations

import re

_PARAM_RE = re.compile(r"\{(\w+)(?::\w+)?\}")
_UNDERSCORES_RE = re.compile(r"_+")


def path_params(path: str) -> list[str]:
    """Return the placeholders of *path*, left to right, without repeats."""
    return list(dict.fromkeys(_PARAM_RE.findall(path)))


def substitute_path_params(path: str, replace: dict[str, str]) -> str:
    """Replace each placeholder whose name is in *replace*; others are left as-is."""
    return _PARAM_RE.sub(lambda m: replace.get(m.group(1), m.group(0)), path)


def tool_name_from_route(method: str, path: str, base: str = "") -> str:
    """Derive the tool name for a route.

    ``GET /v1/users/{id}`` under base ``/v1`` becomes ``get_users_by_id``.
    A route registered at the bare base yields only the method prefix.
    """
    name = path
    if base and name.startswith(base):
        name = name[len(base) :]
    name = name.removeprefix("/")
    name = _PARAM_RE.sub(r"by_\1", name)
    name = name.replace("/", "_")
    name = f"{method.lower()}_{name}"
    return _UNDERSCORES_RE.sub("_", name).rstrip("_")
