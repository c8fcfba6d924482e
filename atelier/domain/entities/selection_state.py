from __future__ import annotations

from dataclasses import dataclass, replace

from atelier.domain.entities.option import Dimension, Option

# Flow order of the selectable dimensions.
DIMENSION_ORDER: tuple[Dimension, ...] = (
    Dimension.TARGET,
    Dimension.CATEGORY,
    Dimension.SUB_CATEGORY,
    Dimension.STYLE_PRESET,
    Dimension.MOOD,
)

_FIELDS: dict[Dimension, str] = {
    Dimension.TARGET: "target",
    Dimension.CATEGORY: "category",
    Dimension.SUB_CATEGORY: "sub_category",
    Dimension.STYLE_PRESET: "style_preset",
    Dimension.MOOD: "mood",
}


@dataclass(frozen=True)
class SelectionState:
    target: Option | None = None
    category: Option | None = None
    sub_category: Option | None = None
    style_preset: Option | None = None
    mood: Option | None = None

    def get(self, dimension: Dimension) -> Option | None:
        return getattr(self, _FIELDS[dimension])

    def has(self, dimension: Dimension) -> bool:
        return self.get(dimension) is not None

    def with_value(self, dimension: Dimension, option: Option | None) -> "SelectionState":
        return replace(self, **{_FIELDS[dimension]: option})

    def without_downstream(self, dimension: Dimension) -> "SelectionState":
        """Return a copy with every dimension after `dimension` cleared."""
        index = DIMENSION_ORDER.index(dimension)
        cleared = {_FIELDS[d]: None for d in DIMENSION_ORDER[index + 1 :]}
        return replace(self, **cleared)

    def garment_label(self) -> str | None:
        option = self.sub_category or self.category
        return option.label if option else None

    def as_dict(self) -> dict[str, Option | None]:
        return {d.value: self.get(d) for d in DIMENSION_ORDER}
