"""routemcp CLI entrypoint."""

from __future__ import annotations

import click

from routemcp import __version__


@click.group()
@click.version_option(version=__version__, prog_name="routemcp")
def main() -> None:
    """routemcp — serve an HTTP route table as MCP tools."""


# Register subcommands
from routemcp.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
