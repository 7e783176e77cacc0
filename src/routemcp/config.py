"""Adapter configuration — server identity and behavior flags."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, field_validator


class AdapterConfig(BaseModel):
    """Configuration for an :class:`~routemcp.mcp.adapter.MCPAdapter`.

    ``origin`` is the fixed authority synthetic tool-call requests are
    addressed to; the route table never sees a real host.
    """

    name: str = "MCP Server"
    version: str = "1.0.0"
    protocol_version: str = "2024-11-05"
    endpoint: str = "/mcp"
    origin: str = "http://localhost"
    strict_names: bool = False
    error_on_http_status: bool = False

    @field_validator("origin")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


class ServeSettings(BaseModel):
    """Settings for ``routemcp serve``."""

    host: str = "127.0.0.1"
    port: int = 3033
    stdio: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    trace: bool = False
    otlp_endpoint: str | None = None
