"""MCP protocol surface derived from an HTTP route table."""

from routemcp.mcp.adapter import MCPAdapter
from routemcp.mcp.bridge import DispatchBridge, RequestSynthesizer
from routemcp.mcp.catalog import ToolCatalog
from routemcp.mcp.dispatcher import RpcDispatcher, parse_message
from routemcp.mcp.metadata import ToolMetadataStore
from routemcp.mcp.models import (
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
    ParamMeta,
    ToolCallResult,
    ToolDefinition,
    ToolMeta,
)
from routemcp.mcp.transport import HttpBinding, StdioBinding

__all__ = [
    "DispatchBridge",
    "HttpBinding",
    "JsonRpcError",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "MCPAdapter",
    "ParamMeta",
    "RequestSynthesizer",
    "RpcDispatcher",
    "StdioBinding",
    "ToolCallResult",
    "ToolCatalog",
    "ToolDefinition",
    "ToolMeta",
    "ToolMetadataStore",
    "parse_message",
]
