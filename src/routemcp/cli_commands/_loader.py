"""Resolve ``module:attribute`` references to route tables and adapters."""

from __future__ import annotations

import importlib

import click

from routemcp.mcp.adapter import MCPAdapter
from routemcp.routing.wrapper import RouterWrapper


def load_target(reference: str) -> RouterWrapper | MCPAdapter:
    """Import ``package.module:attribute`` and check what it points at."""
    module_name, sep, attribute = reference.partition(":")
    if not sep or not module_name or not attribute:
        msg = f"Expected 'module:attribute', got {reference!r}"
        raise click.BadParameter(msg, param_hint="APP")

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise click.BadParameter(f"Cannot import {module_name!r}: {exc}", param_hint="APP") from exc

    target = getattr(module, attribute, None)
    if not isinstance(target, (RouterWrapper, MCPAdapter)):
        msg = f"{reference!r} is not a RouterWrapper or MCPAdapter"
        raise click.BadParameter(msg, param_hint="APP")
    return target
