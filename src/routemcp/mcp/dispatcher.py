"""RpcDispatcher — routes JSON-RPC messages to MCP method handlers.

The dispatcher keeps no session: ``initialize`` only reports server
metadata and every other method works whether or not it was called.
Handlers return a result dict; notifications produce no reply at all.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from pydantic import ValidationError

from routemcp.config import AdapterConfig
from routemcp.errors import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    AdapterError,
    InvalidParamsError,
    ParseError,
)
from routemcp.mcp.bridge import DispatchBridge
from routemcp.mcp.catalog import ToolCatalog
from routemcp.mcp.models import JsonRpcRequest, JsonRpcResponse
from routemcp.utils.telemetry import (
    ATTR_RPC_ERROR_CODE,
    ATTR_RPC_METHOD,
    ATTR_RPC_NOTIFICATION,
    ATTR_TOOL_COUNT,
    get_tracer,
)

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

MethodHandler = Callable[[JsonRpcRequest], Awaitable[dict[str, Any]]]


def parse_message(raw: str | bytes) -> JsonRpcRequest:
    """Decode and validate one JSON-RPC message.

    Raises
    ------
    ParseError
        If *raw* is not JSON, not a JSON object, or not a valid envelope.
    """
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise ParseError(str(exc)) from exc
    return validate_message(data)


def validate_message(data: Any) -> JsonRpcRequest:
    if not isinstance(data, Mapping):
        raise ParseError("message must be a JSON object")
    try:
        return JsonRpcRequest.model_validate(data)
    except ValidationError as exc:
        raise ParseError(f"{exc.error_count()} validation error(s)") from exc


def parse_error_response() -> dict[str, Any]:
    return JsonRpcResponse.fail(None, PARSE_ERROR, "Parse error").to_wire()


class RpcDispatcher:
    """Maps JSON-RPC method names to handlers.

    Usage::

        dispatcher = RpcDispatcher(catalog, bridge, AdapterConfig(name="Todo API"))
        reply = await dispatcher.dispatch({"jsonrpc": "2.0", "id": 1, "method": "tools/list"})
    """

    def __init__(
        self,
        catalog: ToolCatalog,
        bridge: DispatchBridge,
        config: AdapterConfig | None = None,
    ) -> None:
        self._catalog = catalog
        self._bridge = bridge
        self._config = config or AdapterConfig()
        self._handlers: dict[str, MethodHandler] = {
            "initialize": self._initialize,
            "ping": self._ping,
            "tools/list": self._tools_list,
            "tools/call": self._tools_call,
        }

    async def dispatch(
        self, message: JsonRpcRequest | Mapping[str, Any]
    ) -> dict[str, Any] | None:
        """Handle one message and return the wire reply, or ``None`` for notifications.

        Malformed mappings yield a ``-32700`` reply; no exception escapes.
        """
        if not isinstance(message, JsonRpcRequest):
            try:
                message = validate_message(message)
            except ParseError as exc:
                logger.warning("Rejected malformed message: %s", exc)
                return parse_error_response()

        with _tracer.start_as_current_span("routemcp.rpc") as span:
            span.set_attribute(ATTR_RPC_METHOD, message.method)
            span.set_attribute(ATTR_RPC_NOTIFICATION, message.is_notification)
            response = await self._respond(message)
            if response is not None and response.error is not None:
                span.set_attribute(ATTR_RPC_ERROR_CODE, response.error.code)

        if message.is_notification:
            return None
        return response.to_wire() if response is not None else None

    async def _respond(self, message: JsonRpcRequest) -> JsonRpcResponse | None:
        if message.method.startswith("notifications/"):
            logger.debug("Notification %s", message.method)
            return None

        handler = self._handlers.get(message.method)
        if handler is None:
            logger.info("Method not found: %s", message.method)
            return JsonRpcResponse.fail(
                message.id, METHOD_NOT_FOUND, f"Method not found: {message.method}"
            )

        try:
            result = await handler(message)
        except InvalidParamsError as exc:
            return JsonRpcResponse.fail(message.id, INVALID_PARAMS, f"Invalid params: {exc}")
        except AdapterError as exc:
            logger.error("%s failed: %s", message.method, exc)
            return JsonRpcResponse.fail(message.id, INTERNAL_ERROR, str(exc))
        except Exception:
            logger.exception("Unhandled error in %s", message.method)
            return JsonRpcResponse.fail(message.id, INTERNAL_ERROR, "Internal error")
        return JsonRpcResponse.ok(message.id, result)

    # -- method handlers ---------------------------------------------------

    async def _initialize(self, message: JsonRpcRequest) -> dict[str, Any]:
        return {
            "protocolVersion": self._config.protocol_version,
            "capabilities": {"tools": {"listChanged": True}},
            "serverInfo": {"name": self._config.name, "version": self._config.version},
        }

    async def _ping(self, message: JsonRpcRequest) -> dict[str, Any]:
        return {}

    async def _tools_list(self, message: JsonRpcRequest) -> dict[str, Any]:
        with _tracer.start_as_current_span("routemcp.tools.list") as span:
            tools = self._catalog.list_tools()
            span.set_attribute(ATTR_TOOL_COUNT, len(tools))
        return {"tools": [tool.to_wire() for tool in tools]}

    async def _tools_call(self, message: JsonRpcRequest) -> dict[str, Any]:
        params = message.params if message.params is not None else {}
        if not isinstance(params, dict):
            raise InvalidParamsError("params must be an object")
        name = params.get("name")
        if not isinstance(name, str):
            raise InvalidParamsError("missing tool name")
        arguments = params.get("arguments")
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            raise InvalidParamsError("arguments must be an object")
        result = await self._bridge.call_tool(name, arguments)
        return result.to_wire()
