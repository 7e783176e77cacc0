"""RouterWrapper — owns a mounted FastAPI router, its error handling, and its MCP metadata."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

import httpx
from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.routing import Mount

from routemcp.config import AdapterConfig
from routemcp.mcp.adapter import MCPAdapter
from routemcp.mcp.metadata import ToolMetadataStore
from routemcp.mcp.models import ToolMeta

logger = logging.getLogger(__name__)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> PlainTextResponse:
    """Answer an ``HTTPException`` with a ``text/plain`` ``Error: ...`` body."""
    logger.info("Request failed (%d): %s", exc.status_code, exc.detail)
    return PlainTextResponse(
        f"Error: {exc.detail}", status_code=exc.status_code, headers=exc.headers
    )


async def error_handler(request: Request, exc: Exception) -> PlainTextResponse:
    """Answer any other handler exception with a logged 500."""
    logger.error("Server error (500)", exc_info=exc)
    return PlainTextResponse(f"Error: {str(exc) or 'Server Error'}", status_code=500)


class RouterWrapper:
    """An :class:`~fastapi.APIRouter` mounted at *base*, plus the route owner's tool metadata.

    Routes are registered on ``router`` relative to the base; ``app`` serves
    them under it.  The router stays the live route table: routes added after
    ``app`` or an adapter was built are served and listed.

    Usage::

        rw = RouterWrapper.get_new("/api")

        @rw.router.get("/todos")
        def list_todos(done: bool | None = None) -> list[Todo]: ...

        rw.describe_mcp("/todos", "GET", {"description": "List all todos."})
        mcp = rw.as_mcp(name="Todo API")
    """

    def __init__(self, base: str, router: APIRouter | None = None) -> None:
        self.base = base.rstrip("/")
        self.router = router if router is not None else APIRouter()
        self.mcp_meta = ToolMetadataStore()
        self.app = FastAPI(
            routes=[Mount(self.base, app=self.router)],
            exception_handlers={
                StarletteHTTPException: http_error_handler,
                Exception: error_handler,
            },
            openapi_url=None,
        )

    @classmethod
    def get_new(cls, base: str = "") -> RouterWrapper:
        return cls(base)

    async def fetch_handler(self, request: httpx.Request) -> httpx.Response:
        """The route table's dispatch entry point: replays *request* against ``app``."""
        transport = httpx.ASGITransport(app=self.app, raise_app_exceptions=False)
        async with httpx.AsyncClient(transport=transport) as client:
            return await client.send(request)

    def register_route(
        self, new_base: str, initializer: Callable[[str], RouterWrapper]
    ) -> APIRouter:
        """Mount the router built by *initializer* under ``new_base``.

        The mount is live.  Its routes are served but not listed as tools of
        this wrapper; build a separate adapter from the sub-wrapper for that.
        """
        sub = initializer(f"{self.base}{new_base}")
        self.router.mount(new_base, app=sub.router)
        return self.router

    def describe_mcp(
        self, path: str, method: str, meta: ToolMeta | Mapping[str, Any]
    ) -> None:
        """Attach a description and parameter hints to the tool for ``method path``."""
        self.mcp_meta.describe(method, f"{self.base}{path}", meta)

    def as_mcp(
        self,
        name: str | None = None,
        version: str | None = None,
        *,
        config: AdapterConfig | None = None,
    ) -> MCPAdapter:
        """Build an adapter reading this wrapper's live routes and metadata."""
        config = config or AdapterConfig()
        overrides = {key: value for key, value in (("name", name), ("version", version)) if value}
        if overrides:
            config = config.model_copy(update=overrides)
        return MCPAdapter(
            routes=lambda: self.router.routes,
            base=self.base,
            fetch=self.fetch_handler,
            metadata=self.mcp_meta,
            config=config,
        )
