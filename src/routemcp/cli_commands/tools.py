"""``routemcp tools`` — print the tool catalog derived from a route table."""

from __future__ import annotations

import click

from routemcp.cli_commands._loader import load_target
from routemcp.cli_commands._output import console, print_tools_json, print_tools_table
from routemcp.errors import AdapterError
from routemcp.routing.wrapper import RouterWrapper


@click.command()
@click.argument("app")
@click.option("--json", "as_json", is_flag=True, help="Print the tools/list payload as JSON.")
def tools(app: str, as_json: bool) -> None:
    """List the MCP tools derived from APP.

    APP is a ``module:attribute`` reference to a RouterWrapper or MCPAdapter.
    """
    target = load_target(app)
    adapter = target.as_mcp() if isinstance(target, RouterWrapper) else target

    try:
        catalog = adapter.list_tools()
    except AdapterError as exc:
        console.print(f"[red]Catalog error:[/red] {exc}")
        raise SystemExit(1) from exc

    if not catalog:
        console.print("[yellow]No tools derived.[/yellow]")
        return

    if as_json:
        print_tools_json(catalog)
    else:
        print_tools_table(catalog, title=f"Tools ({adapter.server_name})")
