"""Shared CLI output formatters."""

from __future__ import annotations

import json

from rich.console import Console
from rich.table import Table

from routemcp.mcp.models import ToolDefinition  # noqa: TC001

console = Console()
err_console = Console(stderr=True)


def print_tools_table(tools: list[ToolDefinition], *, title: str = "Tools") -> None:
    """Pretty-print a tool catalog as a table."""
    table = Table(title=title)
    table.add_column("Name", style="cyan")
    table.add_column("Parameters")
    table.add_column("Description")

    for tool in tools:
        schema = tool.input_schema
        params = ", ".join(
            f"{name}*" if name in schema.required else name for name in schema.properties
        )
        table.add_row(tool.name, params or "-", _truncate(tool.description))

    console.print(table)


def print_tools_json(tools: list[ToolDefinition]) -> None:
    console.print_json(json.dumps([tool.to_wire() for tool in tools]))


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
