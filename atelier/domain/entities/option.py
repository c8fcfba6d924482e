from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Dimension(str, Enum):
    TARGET = "target"
    CATEGORY = "category"
    SUB_CATEGORY = "subCategory"
    STYLE_PRESET = "stylePreset"
    MOOD = "mood"


@dataclass(frozen=True, eq=False)
class Option:
    id: str
    label: str
    description: str | None = None
    image: str | None = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Option):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
