"""MCP transports — HTTP and stdio front ends over one :class:`RpcDispatcher`.

:class:`HttpBinding` answers ``GET`` with an SSE endpoint announcement and
``POST`` with a JSON-RPC reply.  :class:`StdioBinding` reads newline-delimited
JSON from a byte stream and writes one line per reply.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import stat
from collections.abc import AsyncIterator
from typing import Any, BinaryIO

from fastapi import Request
from fastapi.responses import JSONResponse, Response, StreamingResponse

from routemcp.errors import ParseError
from routemcp.mcp.dispatcher import RpcDispatcher, parse_error_response, parse_message

logger = logging.getLogger(__name__)

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


class HttpBinding:
    """Request/response binding for a single MCP endpoint."""

    def __init__(self, dispatcher: RpcDispatcher, *, endpoint: str = "/mcp") -> None:
        self._dispatcher = dispatcher
        self._endpoint = endpoint

    async def handle(self, request: Request) -> Response:
        if request.method == "GET":
            return StreamingResponse(
                self._announce(), media_type="text/event-stream", headers=SSE_HEADERS
            )
        if request.method != "POST":
            return Response(status_code=405, headers={"Allow": "GET, POST"})

        try:
            message = parse_message(await request.body())
        except ParseError as exc:
            logger.warning("Rejected POST body: %s", exc)
            return JSONResponse(parse_error_response(), status_code=400)

        reply = await self._dispatcher.dispatch(message)
        if reply is None:
            return Response(status_code=204)
        return JSONResponse(reply)

    async def _announce(self) -> AsyncIterator[str]:
        yield f"event: endpoint\ndata: {self._endpoint}\n\n"
        # Held open until the client disconnects.
        await asyncio.Event().wait()


class StdioBinding:
    """Line-delimited JSON-RPC over a byte stream.

    Lines are dispatched one at a time by a single consumer, so replies are
    written in the order their requests arrived.
    """

    def __init__(self, dispatcher: RpcDispatcher, output: BinaryIO) -> None:
        self._dispatcher = dispatcher
        self._output = output
        self._buffer = b""

    async def feed(self, chunk: bytes) -> None:
        """Append *chunk* and process every complete line it finishes."""
        self._buffer += chunk
        *lines, self._buffer = self._buffer.split(b"\n")
        for line in lines:
            await self._process(line)

    async def flush(self) -> None:
        """Process a trailing line that never got its newline."""
        line, self._buffer = self._buffer, b""
        await self._process(line)

    async def serve(self, reader: asyncio.StreamReader, chunk_size: int = 2**16) -> None:
        """Consume *reader* until EOF."""
        while True:
            chunk = await reader.read(chunk_size)
            if not chunk:
                break
            await self.feed(chunk)
        await self.flush()
        logger.info("Input stream closed")

    async def serve_blocking(self, source: BinaryIO, chunk_size: int = 2**16) -> None:
        """Consume a stream the event loop cannot watch, such as a regular file.

        Reads run in a worker thread; dispatch stays on the loop.
        """
        while True:
            chunk = await asyncio.to_thread(source.read, chunk_size)
            if not chunk:
                break
            await self.feed(chunk)
        await self.flush()
        logger.info("Input stream closed")

    async def _process(self, line: bytes) -> None:
        if not line.strip():
            return
        try:
            message = parse_message(line)
        except ParseError as exc:
            logger.warning("Rejected input line: %s", exc)
            self._emit(parse_error_response())
            return
        reply = await self._dispatcher.dispatch(message)
        if reply is not None:
            self._emit(reply)

    def _emit(self, payload: dict[str, Any]) -> None:
        self._output.write(json.dumps(payload, ensure_ascii=False).encode("utf-8") + b"\n")
        self._output.flush()


def is_pollable(source: BinaryIO) -> bool:
    """Whether the event loop can watch *source*: a pipe, a socket or a terminal.

    Regular files, device files such as ``/dev/null`` and in-memory streams
    are not.
    """
    try:
        mode = os.fstat(source.fileno()).st_mode
    except (OSError, ValueError):
        return False
    return stat.S_ISFIFO(mode) or stat.S_ISSOCK(mode) or source.isatty()


async def open_pipe_reader(source: BinaryIO) -> asyncio.StreamReader:
    """Attach an asyncio reader to *source*, which must be :func:`is_pollable`."""
    loop = asyncio.get_running_loop()
    reader = asyncio.StreamReader(limit=2**16)
    protocol = asyncio.StreamReaderProtocol(reader)
    await loop.connect_read_pipe(lambda: protocol, source)
    return reader
