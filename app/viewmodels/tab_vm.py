from __future__ import annotations

from dataclasses import dataclass


@dataclass
class TabVM:
    id: str
    label: str
    count: int = 0
    is_active: bool = False

    @property
    def caption(self) -> str:
        return f"{self.label} ({self.count})"
