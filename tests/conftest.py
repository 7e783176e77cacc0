"""Shared fixtures: a small versioned users API, its MCP adapter, and bare requests."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest
from fastapi import Request

from routemcp.mcp.adapter import MCPAdapter
from routemcp.routing.wrapper import RouterWrapper


def make_test_router() -> RouterWrapper:
    rw = RouterWrapper.get_new("/v1")

    @rw.router.get("/users/{id}")
    def get_user(id: str) -> dict[str, Any]:
        return {"id": id}

    @rw.router.post("/users")
    async def create_user(request: Request) -> dict[str, Any]:
        body = await request.json()
        return {"created": True, **body}

    @rw.router.get("/search")
    def search(request: Request) -> dict[str, Any]:
        return {"q": request.query_params.get("q"), "limit": request.query_params.get("limit")}

    @rw.router.put("/users/{id}")
    async def update_user(id: str, request: Request) -> dict[str, Any]:
        body = await request.json()
        return {"updated": True, "id": id, **body}

    @rw.router.delete("/items/{id}")
    def delete_item(id: str) -> dict[str, Any]:
        return {"deleted": id}

    return rw


def asgi_request(method: str, body: bytes = b"", path: str = "/mcp") -> Request:
    """A bare ASGI request, for calling endpoints without an app around them."""
    scope = {
        "type": "http",
        "method": method,
        "path": path,
        "query_string": b"",
        "headers": [(b"content-type", b"application/json")],
    }

    async def receive() -> dict[str, Any]:
        return {"type": "http.request", "body": body, "more_body": False}

    return Request(scope, receive)


@pytest.fixture
def make_request() -> Callable[..., Request]:
    return asgi_request


@pytest.fixture
def rw() -> RouterWrapper:
    return make_test_router()


@pytest.fixture
def mcp(rw: RouterWrapper) -> MCPAdapter:
    return rw.as_mcp(name="Test API", version="1.0.0")
