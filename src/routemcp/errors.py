"""Shared error types for the adapter layer."""

from __future__ import annotations

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class AdapterError(Exception):
    """Base error for all adapter failures."""


class ParseError(AdapterError):
    """An inbound message is not a well-formed JSON-RPC envelope."""

    code = PARSE_ERROR

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__("Parse error" + (f": {detail}" if detail else ""))


class InvalidParamsError(AdapterError):
    """A method's ``params`` do not have the shape it needs."""


class ToolNotFoundError(AdapterError):
    """No addressable route derives the requested tool name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class MissingPathParamError(AdapterError):
    """A tool call omitted an argument needed to fill a path placeholder."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Missing required path parameter: {name}")


class ToolNameCollisionError(AdapterError):
    """Two distinct routes derive the same tool name."""

    def __init__(self, name: str, paths: list[str]) -> None:
        self.name = name
        self.paths = paths
        super().__init__(f"Tool name collision: {name} ({', '.join(paths)})")
