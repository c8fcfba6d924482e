from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ProductSpecs:
    comfort: int
    versatility: int
    trend: int
    warmth: int
    price_tier: int


@dataclass(frozen=True)
class ProductInfo:
    name: str
    description: str
    styling_tips: str
    materials: str


@dataclass(frozen=True)
class ProductDetails:
    """Structured detail payload returned by the AI provider for one slot."""

    specs: ProductSpecs
    info: ProductInfo
    match_score: int | None = None


@dataclass(frozen=True)
class GeneratedItem:
    id: str
    image_url: str
    info: ProductInfo
    specs: ProductSpecs
    match_score: int | None = None
    # Most recent refinement last; bounded by REFINEMENT_HISTORY_LIMIT.
    modifications: tuple[str, ...] = field(default_factory=tuple)
