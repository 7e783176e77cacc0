"""Request synthesis and the dispatch bridge for ``tools/call``.

:class:`RequestSynthesizer` turns a tool's argument bag into a synthetic
``httpx.Request`` against the route it was derived from;
:class:`DispatchBridge` replays that request through the route table's own
dispatch entry point and wraps the response body as tool-call content.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any
from urllib.parse import quote

import httpx

from routemcp.errors import MissingPathParamError, ToolNotFoundError
from routemcp.mcp.catalog import RouteOperation, ToolCatalog
from routemcp.mcp.models import ToolCallResult
from routemcp.mcp.naming import path_params, substitute_path_params
from routemcp.mcp.schema import BODY_METHODS
from routemcp.utils.telemetry import (
    ATTR_HTTP_METHOD,
    ATTR_HTTP_STATUS,
    ATTR_TOOL_IS_ERROR,
    ATTR_TOOL_NAME,
    ATTR_URL_PATH,
    get_tracer,
)

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

Fetch = Callable[[httpx.Request], Awaitable[httpx.Response]]


def _stringify(value: Any) -> str:
    """Render an argument as URL text.

    Booleans and containers use their JSON spelling; ``None`` is an empty
    value and numbers keep Python's ``str`` form (``1.0`` stays ``1.0``).
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def _encode(value: Any) -> str:
    return quote(_stringify(value), safe="")


class RequestSynthesizer:
    """Builds the HTTP request a tool call stands for."""

    def __init__(self, origin: str = "http://localhost") -> None:
        self._origin = origin.rstrip("/")

    def build(self, operation: RouteOperation, args: Mapping[str, Any]) -> httpx.Request:
        """Fill path params, append the remaining args as the query string,
        and attach a JSON body for mutating verbs.

        Raises
        ------
        MissingPathParamError
            If an argument needed by a path placeholder is absent or null.
        """
        names = path_params(operation.path)
        filled: dict[str, str] = {}
        for name in names:
            if args.get(name) is None:
                raise MissingPathParamError(name)
            filled[name] = _encode(args[name])
        path = substitute_path_params(operation.path, filled)

        query = "&".join(
            f"{quote(str(key), safe='')}={_encode(value)}"
            for key, value in args.items()
            if key != "body" and key not in names
        )
        url = f"{self._origin}{path}" + (f"?{query}" if query else "")

        method = operation.method
        body = args.get("body")
        if method in BODY_METHODS and body is not None:
            return httpx.Request(
                method,
                url,
                content=json.dumps(body).encode("utf-8"),
                headers={"Content-Type": "application/json"},
            )
        return httpx.Request(method, url)


class DispatchBridge:
    """Resolves tool names, replays requests, and normalizes responses.

    Every failure after name resolution, including an exception from the
    dispatch entry point itself, ends up as an ``isError`` result; nothing
    but cancellation propagates out of :meth:`call_tool`.
    """

    def __init__(
        self,
        catalog: ToolCatalog,
        synthesizer: RequestSynthesizer,
        fetch: Fetch,
        *,
        error_on_http_status: bool = False,
    ) -> None:
        self._catalog = catalog
        self._synthesizer = synthesizer
        self._fetch = fetch
        self._error_on_http_status = error_on_http_status

    async def call_tool(
        self, name: str, args: Mapping[str, Any] | None = None
    ) -> ToolCallResult:
        with _tracer.start_as_current_span("routemcp.tools.call") as span:
            span.set_attribute(ATTR_TOOL_NAME, name)
            operation = self._catalog.find_route(name)
            if operation is None:
                logger.info("tools/call for unknown tool %s", name)
                span.set_attribute(ATTR_TOOL_IS_ERROR, True)
                return ToolCallResult.error(str(ToolNotFoundError(name)))

            try:
                request = self._synthesizer.build(operation, args or {})
                span.set_attribute(ATTR_HTTP_METHOD, request.method)
                span.set_attribute(ATTR_URL_PATH, request.url.path)
                response = await self._fetch(request)
                await response.aread()
            except Exception as exc:
                logger.warning("Tool %s failed", name, exc_info=True)
                span.set_attribute(ATTR_TOOL_IS_ERROR, True)
                return ToolCallResult.error(str(exc) or type(exc).__name__)

            span.set_attribute(ATTR_HTTP_STATUS, response.status_code)
            text = self._render(response.text)
            if response.is_error:
                logger.info("Tool %s answered HTTP %d", name, response.status_code)
                if self._error_on_http_status:
                    span.set_attribute(ATTR_TOOL_IS_ERROR, True)
                    return ToolCallResult.error(text)
            return ToolCallResult.from_text(text)

    @staticmethod
    def _render(body: str) -> str:
        """JSON bodies are re-serialized compactly; anything else passes through."""
        try:
            content = json.loads(body)
        except ValueError:
            return body
        if isinstance(content, str):
            return content
        return json.dumps(content, separators=(",", ":"), ensure_ascii=False)
