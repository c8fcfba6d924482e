from __future__ import annotations

from abc import ABC, abstractmethod

from atelier.domain.entities.option import Dimension, Option


class OptionCatalogPort(ABC):
    @abstractmethod
    def list_options(self, dimension: Dimension, category_id: str | None = None) -> list[Option]:
        """List options for a dimension. Sub-categories require `category_id`."""
        raise NotImplementedError

    @abstractmethod
    def get_option(self, dimension: Dimension, option_id: str, category_id: str | None = None) -> Option | None:
        """Get an option by id. Returns None if not found (or not under `category_id`)."""
        raise NotImplementedError

    @abstractmethod
    def has_sub_categories(self, category_id: str) -> bool:
        raise NotImplementedError
