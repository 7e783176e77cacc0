"""MCPAdapter — exposes a route table as an MCP server.

Usually obtained from :meth:`routemcp.routing.wrapper.RouterWrapper.as_mcp`::

    rw = RouterWrapper.get_new("/v1")
    rw.router.get("/users/{id}")(get_user)
    mcp = rw.as_mcp(name="Users API", version="1.0.0")

    await mcp.handle_json_rpc({"jsonrpc": "2.0", "id": 1, "method": "tools/list"})
    rw.router.add_route("/mcp", mcp.http_handler)   # HTTP transport
    await mcp.serve_stdio()                          # or stdio transport
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable, Iterable, Mapping
from typing import Any, BinaryIO

from fastapi import Request
from fastapi.responses import Response

from routemcp.config import AdapterConfig
from routemcp.mcp.bridge import DispatchBridge, Fetch, RequestSynthesizer
from routemcp.mcp.catalog import RouteSource, ToolCatalog
from routemcp.mcp.dispatcher import RpcDispatcher
from routemcp.mcp.metadata import ToolMetadataStore
from routemcp.mcp.models import JsonRpcRequest, ToolCallResult, ToolDefinition
from routemcp.mcp.naming import tool_name_from_route
from routemcp.mcp.schema import infer_query_params
from routemcp.mcp.transport import HttpBinding, StdioBinding, is_pollable, open_pipe_reader

logger = logging.getLogger(__name__)


class MCPAdapter:
    """Derives tools from *routes* and serves them over JSON-RPC.

    The adapter keeps references, not copies: *routes* is called and
    *metadata* read on every listing and call.
    """

    def __init__(
        self,
        routes: RouteSource,
        base: str,
        fetch: Fetch,
        metadata: ToolMetadataStore | None = None,
        config: AdapterConfig | None = None,
    ) -> None:
        self.base = base
        self.config = config or AdapterConfig()
        self.catalog = ToolCatalog(
            routes,
            metadata if metadata is not None else ToolMetadataStore(),
            base=base,
            strict_names=self.config.strict_names,
        )
        self.bridge = DispatchBridge(
            self.catalog,
            RequestSynthesizer(origin=self.config.origin),
            fetch,
            error_on_http_status=self.config.error_on_http_status,
        )
        self.dispatcher = RpcDispatcher(self.catalog, self.bridge, self.config)
        self._http = HttpBinding(self.dispatcher, endpoint=self.config.endpoint)

    @property
    def server_name(self) -> str:
        return self.config.name

    @property
    def server_version(self) -> str:
        return self.config.version

    def tool_name_from_route(self, method: str, path: str) -> str:
        return tool_name_from_route(method, path, self.base)

    def infer_query_params(self, handlers: Iterable[Callable[..., object]]) -> list[str]:
        return infer_query_params(handlers)

    def introspect_routes(self) -> list[ToolDefinition]:
        """Current tool catalog, derived fresh from the route table."""
        return self.catalog.list_tools()

    list_tools = introspect_routes

    async def call_tool(
        self, name: str, args: Mapping[str, Any] | None = None
    ) -> ToolCallResult:
        return await self.bridge.call_tool(name, args)

    async def handle_json_rpc(
        self, message: JsonRpcRequest | Mapping[str, Any]
    ) -> dict[str, Any] | None:
        """Dispatch one message; ``None`` means no reply must be sent."""
        return await self.dispatcher.dispatch(message)

    async def http_handler(self, request: Request) -> Response:
        """HTTP transport; mountable as an all-methods route endpoint."""
        return await self._http.handle(request)

    async def serve_stdio(
        self, source: BinaryIO | None = None, output: BinaryIO | None = None
    ) -> None:
        """Serve newline-delimited JSON-RPC until *source* (stdin) is exhausted.

        Pipes and terminals are read by the event loop; regular files (shell
        redirection) are read from a worker thread.
        """
        source = source or sys.stdin.buffer
        binding = StdioBinding(self.dispatcher, output or sys.stdout.buffer)
        if is_pollable(source):
            await binding.serve(await open_pipe_reader(source))
        else:
            logger.debug("Input is not a pipe; reading it from a worker thread")
            await binding.serve_blocking(source)
