"""Tests for RouterWrapper."""

from __future__ import annotations

import logging

import httpx
import pytest
from fastapi import HTTPException

from routemcp.config import AdapterConfig
from routemcp.routing.wrapper import RouterWrapper


def _req(path: str, method: str = "GET") -> httpx.Request:
    return httpx.Request(method, f"http://localhost{path}")


class TestFetchHandler:
    async def test_result_becomes_response(self, rw: RouterWrapper) -> None:
        response = await rw.fetch_handler(_req("/v1/users/5"))
        assert response.status_code == 200
        assert response.json() == {"id": "5"}

    async def test_unmatched_is_404(self, rw: RouterWrapper) -> None:
        response = await rw.fetch_handler(_req("/v1/nowhere"))
        assert response.status_code == 404
        assert response.text == "Error: Not Found"

    async def test_outside_base_is_404(self, rw: RouterWrapper) -> None:
        response = await rw.fetch_handler(_req("/v1users/5"))
        assert response.status_code == 404

    async def test_wrong_method_is_405(self, rw: RouterWrapper) -> None:
        response = await rw.fetch_handler(_req("/v1/search", "POST"))
        assert response.status_code == 405
        assert response.text == "Error: Method Not Allowed"

    async def test_http_exception(self, rw: RouterWrapper) -> None:
        @rw.router.get("/gone")
        def gone() -> None:
            raise HTTPException(410, "gone for good")

        response = await rw.fetch_handler(_req("/v1/gone"))
        assert response.status_code == 410
        assert response.text == "Error: gone for good"
        assert response.headers["content-type"].startswith("text/plain")

    async def test_unexpected_error_is_500(
        self, rw: RouterWrapper, caplog: pytest.LogCaptureFixture
    ) -> None:
        @rw.router.get("/crash")
        def crash() -> None:
            raise RuntimeError("boom")

        with caplog.at_level(logging.ERROR, logger="routemcp.routing.wrapper"):
            response = await rw.fetch_handler(_req("/v1/crash"))
        assert response.status_code == 500
        assert response.text == "Error: boom"
        assert "Server error (500)" in caplog.text

    async def test_error_without_message(self, rw: RouterWrapper) -> None:
        @rw.router.get("/crash")
        def crash() -> None:
            raise RuntimeError

        response = await rw.fetch_handler(_req("/v1/crash"))
        assert response.text == "Error: Server Error"


class TestApp:
    async def test_serves_under_base(self, rw: RouterWrapper) -> None:
        transport = httpx.ASGITransport(app=rw.app)
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
            found = await client.get("/v1/search", params={"q": "a b", "limit": 3})
            created = await client.post("/v1/users", json={"name": "Ada"})
            unprefixed = await client.get("/users/1")
        assert found.json() == {"q": "a b", "limit": "3"}
        assert created.json() == {"created": True, "name": "Ada"}
        assert unprefixed.status_code == 404

    async def test_routes_added_after_app(self, rw: RouterWrapper) -> None:
        app = rw.app
        rw.router.get("/late")(lambda: {"late": True})
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
            response = await client.get("/v1/late")
        assert response.json() == {"late": True}

    async def test_no_schema_routes(self) -> None:
        rw = RouterWrapper.get_new()
        rw.router.get("/openapi.json")(lambda: {"mine": True})
        response = await rw.fetch_handler(_req("/openapi.json"))
        assert response.json() == {"mine": True}


class TestRegisterRoute:
    def _admin(self, base: str) -> RouterWrapper:
        sub = RouterWrapper.get_new(base)
        sub.router.get("/stats")(lambda: {"base": base})
        return sub

    async def test_mounted_routes_are_served(self, rw: RouterWrapper) -> None:
        rw.register_route("/admin", self._admin)
        response = await rw.fetch_handler(_req("/v1/admin/stats"))
        assert response.json() == {"base": "/v1/admin"}

    def test_mounted_routes_are_not_tools(self, rw: RouterWrapper) -> None:
        rw.register_route("/admin", self._admin)
        names = [tool.name for tool in rw.as_mcp().list_tools()]
        assert not any("admin" in name for name in names)


class TestDescribeMcp:
    def test_keyed_by_full_path(self, rw: RouterWrapper) -> None:
        rw.describe_mcp("/users/{id}", "get", {"description": "One user"})
        assert "GET:/v1/users/{id}" in rw.mcp_meta


class TestAsMcp:
    def test_name_and_version(self, rw: RouterWrapper) -> None:
        mcp = rw.as_mcp(name="Users", version="2.0.0")
        assert (mcp.server_name, mcp.server_version) == ("Users", "2.0.0")
        assert mcp.base == "/v1"

    def test_arguments_override_config(self, rw: RouterWrapper) -> None:
        config = AdapterConfig(name="From config", version="0.1.0", strict_names=True)
        mcp = rw.as_mcp(name="From args", config=config)
        assert mcp.server_name == "From args"
        assert mcp.server_version == "0.1.0"
        assert mcp.config.strict_names
        assert config.name == "From config"

    def test_adapters_share_live_routes(self, rw: RouterWrapper) -> None:
        first, second = rw.as_mcp(), rw.as_mcp()
        rw.router.patch("/users/{id}")(lambda id: None)
        assert "patch_users_by_id" in [tool.name for tool in first.list_tools()]
        assert "patch_users_by_id" in [tool.name for tool in second.list_tools()]

    def test_trailing_slash_in_base(self) -> None:
        rw = RouterWrapper.get_new("/api/")
        rw.router.get("/todos")(lambda: [])
        assert [tool.name for tool in rw.as_mcp().list_tools()] == ["get_todos"]
