"""Settings access helpers for JSON-based configuration."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from core.models import EntityKind, SortDirection, SortKey
from core.profiles import get_profile, parse_sort_option
from core.services.slot_allocator import MAX_DAY, MIN_DAY
from core.services.view_reducer import DEFAULT_PAGE_SIZE


class JsonSettings:
    """Lightweight JSON settings reader with dotted-key access."""

    def __init__(self, settings_path: str | Path) -> None:
        self._path = Path(settings_path)
        if not self._path.exists():
            raise FileNotFoundError(f"settings.json not found: {self._path}")
        with self._path.open("r", encoding="utf-8") as f:
            self._data = json.load(f)

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return value for dotted `key`, or `default` if not present."""
        parts = key.split(".")
        node: Any = self._data
        for part in parts:
            if isinstance(node, dict) and part in node:
                node = node[part]
            else:
                return default
        return node

    @property
    def base_url(self) -> str:
        return str(self.get("api.base_url", "http://localhost:5000/api"))

    @property
    def timeout(self) -> float:
        return float(self.get("api.timeout_seconds", 15))

    @property
    def page_size(self) -> int:
        value = int(self.get("list.page_size", DEFAULT_PAGE_SIZE))
        return value if value > 0 else DEFAULT_PAGE_SIZE

    @property
    def slot_range(self) -> tuple[int, int]:
        return int(self.get("scheduling.min_day", MIN_DAY)), int(self.get("scheduling.max_day", MAX_DAY))

    def sort_default(self, kind: EntityKind) -> tuple[SortKey, SortDirection]:
        """Configured default sort for `kind`, falling back to the profile's.

        Raises:
            ValueError: if the configured option is malformed or not sortable for `kind`.
        """
        profile = get_profile(kind)
        option = self.get(f"sorting.defaults.{kind.value}")
        if not option:
            return profile.default_sort
        key, direction = parse_sort_option(str(option))
        if not profile.supports_sort(key):
            raise ValueError(f"{kind.value}: cannot sort by {key.value}")
        return key, direction
