from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ClosetAnalysis:
    color: str
    style: str
    season: str
    material: str


@dataclass(frozen=True)
class ClosetItem:
    id: str
    image_url: str
    analysis: ClosetAnalysis
