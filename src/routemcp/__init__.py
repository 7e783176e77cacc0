"""routemcp — serve an HTTP route table as Model Context Protocol tools."""

from __future__ import annotations

from typing import TYPE_CHECKING

__version__ = "0.1.0"

if TYPE_CHECKING:
    from routemcp.mcp.adapter import MCPAdapter as MCPAdapter
    from routemcp.routing.wrapper import RouterWrapper as RouterWrapper

_EXPORTS = {
    "MCPAdapter": "routemcp.mcp.adapter",
    "RouterWrapper": "routemcp.routing.wrapper",
}


def __getattr__(name: str) -> object:
    module_path = _EXPORTS.get(name)
    if module_path is not None:
        import importlib

        mod = importlib.import_module(module_path)
        return getattr(mod, name)
    raise AttributeError(f"module 'routemcp' has no attribute {name!r}")
