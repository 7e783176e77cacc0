"""Tests for ``routemcp tools`` CLI command."""

from __future__ import annotations

import json
from unittest.mock import patch

from click.testing import CliRunner

from routemcp.cli import main
from routemcp.config import AdapterConfig
from routemcp.routing.wrapper import RouterWrapper


class TestToolsCommand:
    def test_table(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["tools", "routemcp.demo:api"])

        assert result.exit_code == 0
        assert "get_todos" in result.output
        assert "Tools (MCP Server)" in result.output

    def test_json(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["tools", "routemcp.demo:api", "--json"])

        assert result.exit_code == 0
        tools = json.loads(result.output)
        names = [tool["name"] for tool in tools]
        assert names == [
            "get_todos",
            "get_todos_by_id",
            "post_todos",
            "put_todos_by_id",
            "delete_todos_by_id",
            "get_search",
        ]
        assert tools[0]["description"] == "List all todos. Optionally filter by done status."

    def test_accepts_adapter(self, rw: RouterWrapper) -> None:
        with patch("routemcp.cli_commands.tools.load_target", return_value=rw.as_mcp()):
            runner = CliRunner()
            result = runner.invoke(main, ["tools", "tests:adapter", "--json"])

        assert result.exit_code == 0
        assert "delete_items_by_id" in result.output

    def test_no_tools(self) -> None:
        with patch(
            "routemcp.cli_commands.tools.load_target",
            return_value=RouterWrapper.get_new("/empty"),
        ):
            runner = CliRunner()
            result = runner.invoke(main, ["tools", "tests:empty"])

        assert result.exit_code == 0
        assert "No tools derived" in result.output

    def test_collision_error(self, rw: RouterWrapper) -> None:
        rw.router.get("/users/by_id")(lambda: None)
        adapter = rw.as_mcp(config=AdapterConfig(strict_names=True))
        with patch("routemcp.cli_commands.tools.load_target", return_value=adapter):
            runner = CliRunner()
            result = runner.invoke(main, ["tools", "tests:strict"])

        assert result.exit_code == 1
        assert "Catalog error" in result.output

    def test_bad_reference(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["tools", "no-colon"])

        assert result.exit_code == 2
        assert "module:attribute" in result.output

    def test_unimportable_module(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["tools", "routemcp_missing_module:api"])

        assert result.exit_code == 2
        assert "Cannot import" in result.output

    def test_wrong_attribute_type(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["tools", "routemcp.demo:todos"])

        assert result.exit_code == 2
        assert "is not a RouterWrapper or MCPAdapter" in result.output


class TestVersion:
    def test_version_option(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["--version"])

        assert result.exit_code == 0
        assert "routemcp" in result.output
