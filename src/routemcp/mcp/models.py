"""MCP models — JSON-RPC 2.0 envelopes, tool definitions, and call results.

Implements the message format used by the Model Context Protocol for
tool discovery (``tools/list``) and execution (``tools/call``), plus the
route-owner metadata overrides layered onto derived tools.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# JSON-RPC 2.0 envelope
# ---------------------------------------------------------------------------


class JsonRpcRequest(BaseModel):
    """A JSON-RPC 2.0 request or notification.

    A message without an ``id`` member is a notification; an explicit
    ``"id": null`` still expects a reply.
    """

    jsonrpc: str = "2.0"
    method: str
    id: int | str | None = None
    params: dict[str, Any] | list[Any] | None = None

    @property
    def is_notification(self) -> bool:
        return "id" not in self.model_fields_set


class JsonRpcError(BaseModel):
    """A JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None


class JsonRpcResponse(BaseModel):
    """A JSON-RPC 2.0 response message."""

    jsonrpc: str = "2.0"
    id: int | str | None = None
    result: dict[str, Any] | None = None
    error: JsonRpcError | None = None

    @classmethod
    def ok(cls, id_: int | str | None, result: dict[str, Any]) -> JsonRpcResponse:
        return cls(id=id_, result=result)

    @classmethod
    def fail(cls, id_: int | str | None, code: int, message: str) -> JsonRpcResponse:
        return cls(id=id_, error=JsonRpcError(code=code, message=message))

    def to_wire(self) -> dict[str, Any]:
        """Dump for the wire: ``id`` always present, unset members omitted."""
        data = self.model_dump(exclude_none=True)
        data["id"] = self.id
        return data


# ---------------------------------------------------------------------------
# Route-owner metadata overrides
# ---------------------------------------------------------------------------


class ParamMeta(BaseModel):
    """Description/type hint for one tool parameter."""

    description: str | None = None
    type: str | None = None


class ToolMeta(BaseModel):
    """Human-authored overrides for one route's tool definition."""

    description: str | None = None
    params: dict[str, ParamMeta] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Tool definitions (``tools/list``)
# ---------------------------------------------------------------------------


class PropertySchema(BaseModel):
    type: str = "string"
    description: str | None = None


class InputSchema(BaseModel):
    type: Literal["object"] = "object"
    properties: dict[str, PropertySchema] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)


class ToolDefinition(BaseModel):
    """A tool definition as returned by ``tools/list``."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    description: str = ""
    input_schema: InputSchema = Field(default_factory=InputSchema, alias="inputSchema")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Tool call results (``tools/call``)
# ---------------------------------------------------------------------------


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ToolCallResult(BaseModel):
    """The content envelope returned from invoking a tool."""

    model_config = ConfigDict(populate_by_name=True)

    content: list[TextContent]
    is_error: bool | None = Field(default=None, alias="isError")

    @classmethod
    def from_text(cls, text: str) -> ToolCallResult:
        return cls(content=[TextContent(text=text)])

    @classmethod
    def error(cls, message: str) -> ToolCallResult:
        return cls(content=[TextContent(text=message)], is_error=True)

    @property
    def text(self) -> str:
        return "\n".join(item.text for item in self.content)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
