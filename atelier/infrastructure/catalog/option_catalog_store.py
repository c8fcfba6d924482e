from __future__ import annotations

from atelier.application.ports.option_catalog import OptionCatalogPort
from atelier.domain.entities.option import Dimension, Option
from atelier.infrastructure.catalog.option_catalog_data import (
    CATEGORY_OPTIONS,
    MOOD_OPTIONS,
    STYLE_PRESETS,
    SUB_CATEGORY_OPTIONS,
    TARGET_OPTIONS,
)


class StaticOptionCatalog(OptionCatalogPort):
    def __init__(
        self,
        options: dict[Dimension, list[Option]] | None = None,
        sub_categories: dict[str, list[Option]] | None = None,
    ) -> None:
        self._options = options or {
            Dimension.TARGET: TARGET_OPTIONS,
            Dimension.CATEGORY: CATEGORY_OPTIONS,
            Dimension.STYLE_PRESET: STYLE_PRESETS,
            Dimension.MOOD: MOOD_OPTIONS,
        }
        self._sub_categories = sub_categories if sub_categories is not None else SUB_CATEGORY_OPTIONS

    def list_options(self, dimension: Dimension, category_id: str | None = None) -> list[Option]:
        if dimension == Dimension.SUB_CATEGORY:
            if not category_id:
                return []
            return list(self._sub_categories.get(category_id.lower().strip(), []))
        return list(self._options.get(dimension, []))

    def get_option(self, dimension: Dimension, option_id: str, category_id: str | None = None) -> Option | None:
        normalized_id = option_id.lower().strip()
        return next(
            (o for o in self.list_options(dimension, category_id) if o.id.lower() == normalized_id),
            None,
        )

    def has_sub_categories(self, category_id: str) -> bool:
        return bool(self._sub_categories.get(category_id.lower().strip()))
