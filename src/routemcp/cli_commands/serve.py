"""``routemcp serve`` — run a route table as an MCP server over HTTP or stdio."""

from __future__ import annotations

import asyncio
import logging
import sys

import click

from routemcp.cli_commands._loader import load_target
from routemcp.cli_commands._output import err_console
from routemcp.config import AdapterConfig, ServeSettings
from routemcp.routing.wrapper import RouterWrapper
from routemcp.utils.telemetry import configure_telemetry


@click.command()
@click.argument("app")
@click.option("--stdio", is_flag=True, help="Serve MCP over stdin/stdout instead of HTTP.")
@click.option("--host", default="127.0.0.1", show_default=True, help="HTTP bind address.")
@click.option(
    "--port", type=int, default=3033, envvar="PORT", show_default=True, help="HTTP port."
)
@click.option("--name", default=None, help="Server name reported by initialize.")
@click.option("--server-version", default=None, help="Server version reported by initialize.")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    show_default=True,
)
@click.option(
    "--trace", is_flag=True, help="Export OpenTelemetry spans to stderr (needs routemcp[otel])."
)
@click.option(
    "--otlp-endpoint", default=None, help="Export OpenTelemetry spans via OTLP/gRPC to this URL."
)
def serve(
    app: str,
    stdio: bool,
    host: str,
    port: int,
    name: str | None,
    server_version: str | None,
    log_level: str,
    trace: bool,
    otlp_endpoint: str | None,
) -> None:
    """Serve the routes of APP as MCP tools.

    APP is a ``module:attribute`` reference to a RouterWrapper, e.g.
    ``routemcp.demo:api``.  In HTTP mode the REST routes are served as-is and
    the MCP endpoint is mounted at ``<base>/mcp``.
    """
    settings = ServeSettings(
        host=host,
        port=port,
        stdio=stdio,
        log_level=log_level.upper(),
        trace=trace,
        otlp_endpoint=otlp_endpoint,
    )
    # stdout belongs to the stdio transport; logs always go to stderr.
    logging.basicConfig(level=settings.log_level, stream=sys.stderr)

    target = load_target(app)
    if not isinstance(target, RouterWrapper):
        msg = f"{app!r} must be a RouterWrapper to be served"
        raise click.BadParameter(msg, param_hint="APP")

    endpoint = "/mcp"
    config = AdapterConfig(endpoint=f"{target.base}{endpoint}")
    adapter = target.as_mcp(name, server_version, config=config)

    if settings.trace or settings.otlp_endpoint:
        try:
            configure_telemetry(
                service_name=adapter.server_name,
                export_to_console=settings.trace,
                otlp_endpoint=settings.otlp_endpoint,
            )
        except ImportError as exc:
            raise click.ClickException(str(exc)) from exc

    if settings.stdio:
        asyncio.run(adapter.serve_stdio())
        return

    import uvicorn

    target.router.add_route(endpoint, adapter.http_handler)
    err_console.print(f"[bold]{adapter.server_name}[/bold] on http://{settings.host}:{settings.port}")
    err_console.print(f"  REST: http://{settings.host}:{settings.port}{target.base}/")
    err_console.print(f"  MCP:  http://{settings.host}:{settings.port}{config.endpoint}")
    uvicorn.run(
        target.app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
