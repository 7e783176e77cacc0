"""Tests for MCP wire models and the metadata store."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from routemcp.mcp.metadata import ToolMetadataStore
from routemcp.mcp.models import (
    InputSchema,
    JsonRpcRequest,
    JsonRpcResponse,
    PropertySchema,
    ToolCallResult,
    ToolDefinition,
    ToolMeta,
)


class TestJsonRpcRequest:
    def test_notification_has_no_id_member(self) -> None:
        assert JsonRpcRequest.model_validate({"method": "ping"}).is_notification

    def test_explicit_null_id_is_not_notification(self) -> None:
        message = JsonRpcRequest.model_validate({"method": "ping", "id": None})
        assert not message.is_notification
        assert message.id is None

    def test_string_id(self) -> None:
        assert JsonRpcRequest.model_validate({"method": "ping", "id": "abc"}).id == "abc"

    def test_method_required(self) -> None:
        with pytest.raises(ValidationError):
            JsonRpcRequest.model_validate({"id": 1})


class TestJsonRpcResponse:
    def test_ok_wire(self) -> None:
        assert JsonRpcResponse.ok(1, {"a": 1}).to_wire() == {
            "jsonrpc": "2.0",
            "id": 1,
            "result": {"a": 1},
        }

    def test_fail_wire_keeps_null_id(self) -> None:
        assert JsonRpcResponse.fail(None, -32700, "Parse error").to_wire() == {
            "jsonrpc": "2.0",
            "id": None,
            "error": {"code": -32700, "message": "Parse error"},
        }


class TestToolDefinition:
    def test_wire_uses_camel_case(self) -> None:
        tool = ToolDefinition(
            name="get_users",
            description="GET /users",
            input_schema=InputSchema(properties={"q": PropertySchema()}),
        )
        assert tool.to_wire() == {
            "name": "get_users",
            "description": "GET /users",
            "inputSchema": {
                "type": "object",
                "properties": {"q": {"type": "string"}},
                "required": [],
            },
        }


class TestToolCallResult:
    def test_success_omits_is_error(self) -> None:
        assert ToolCallResult.from_text("hi").to_wire() == {
            "content": [{"type": "text", "text": "hi"}]
        }

    def test_error(self) -> None:
        result = ToolCallResult.error("bad")
        assert result.to_wire() == {"content": [{"type": "text", "text": "bad"}], "isError": True}
        assert result.text == "bad"


class TestToolMetadataStore:
    def test_key_normalizes_method(self) -> None:
        assert ToolMetadataStore.key("get", "/v1/users") == "GET:/v1/users"

    def test_describe_validates_mapping(self) -> None:
        store = ToolMetadataStore()
        store.describe("GET", "/v1/users/{id}", {"params": {"id": {"description": "User id"}}})
        meta = store.get("get", "/v1/users/{id}")
        assert isinstance(meta, ToolMeta)
        assert meta.description is None
        assert meta.params["id"].description == "User id"
        assert "GET:/v1/users/{id}" in store
        assert len(store) == 1

    def test_last_write_wins(self) -> None:
        store = ToolMetadataStore()
        store.describe("GET", "/v1/users", ToolMeta(description="first"))
        store.describe("GET", "/v1/users", ToolMeta(description="second"))
        meta = store.get("GET", "/v1/users")
        assert meta is not None
        assert meta.description == "second"
        assert len(store) == 1

    def test_missing(self) -> None:
        assert ToolMetadataStore().get("GET", "/nothing") is None

    def test_rejects_bad_shape(self) -> None:
        with pytest.raises(ValidationError):
            ToolMetadataStore().describe("GET", "/x", {"params": "not-a-dict"})
