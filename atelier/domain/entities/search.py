from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Literal

Complexity = Literal["Low", "Medium", "High", "Masterpiece"]


@dataclass(frozen=True)
class ImageRef:
    """An image handed to the AI provider: raw bytes or a URL (http or data:)."""

    data: bytes | None = None
    url: str | None = None
    mime_type: str = "image/jpeg"

    def as_url(self) -> str:
        if self.data is not None:
            encoded = base64.b64encode(self.data).decode("ascii")
            return f"data:{self.mime_type};base64,{encoded}"
        return self.url or ""

    def is_empty(self) -> bool:
        return not self.data and not self.url


@dataclass(frozen=True)
class SearchLink:
    title: str
    uri: str


@dataclass(frozen=True)
class SearchResult:
    description: str
    links: tuple[SearchLink, ...] = field(default_factory=tuple)
    fallback_search_url: str | None = None


@dataclass(frozen=True)
class BespokeQuote:
    fabric_name: str
    fabric_cost: float
    labor_hours: float
    labor_cost: float
    total_cost: float
    timeline: str
    complexity: Complexity
    comments: str
