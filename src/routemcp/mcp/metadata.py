"""ToolMetadataStore — route-owner overrides keyed by method and full path."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from routemcp.mcp.models import ToolMeta


class ToolMetadataStore:
    """Upsert-only mapping from ``"{METHOD}:{fullPath}"`` to :class:`ToolMeta`.

    The adapter only reads from the store, and reads it on every catalog
    build, so entries written after the adapter was created still apply.
    """

    def __init__(self) -> None:
        self._entries: dict[str, ToolMeta] = {}

    @staticmethod
    def key(method: str, full_path: str) -> str:
        return f"{method.upper()}:{full_path}"

    def describe(
        self, method: str, full_path: str, meta: ToolMeta | Mapping[str, Any]
    ) -> None:
        """Store *meta* for the route; the last write per key wins."""
        if not isinstance(meta, ToolMeta):
            meta = ToolMeta.model_validate(meta)
        self._entries[self.key(method, full_path)] = meta

    def get(self, method: str, full_path: str) -> ToolMeta | None:
        return self._entries.get(self.key(method, full_path))

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
