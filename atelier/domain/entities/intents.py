"""Intents dispatched to the flow reducer.

User intents come from the API layer; lifecycle intents are dispatched by the
flow controller around the asynchronous generation and refinement stages.
"""

from __future__ import annotations

from dataclasses import dataclass

from atelier.domain.entities.closet import ClosetItem
from atelier.domain.entities.flow_step import FlowStep
from atelier.domain.entities.generated_item import GeneratedItem
from atelier.domain.entities.option import Dimension, Option


@dataclass(frozen=True)
class Select:
    dimension: Dimension
    option: Option


@dataclass(frozen=True)
class Navigate:
    step: FlowStep


@dataclass(frozen=True)
class Reset:
    pass


@dataclass(frozen=True)
class GenerationStarted:
    pass


@dataclass(frozen=True)
class GenerationCompleted:
    epoch: int
    items: tuple[GeneratedItem, ...]


@dataclass(frozen=True)
class GenerationFailed:
    epoch: int
    reason: str


@dataclass(frozen=True)
class ChooseItem:
    item_id: str


@dataclass(frozen=True)
class BackToGeneration:
    pass


@dataclass(frozen=True)
class RefinementStarted:
    pass


@dataclass(frozen=True)
class RefinementCompleted:
    epoch: int
    item_id: str
    image_url: str
    modification: str


@dataclass(frozen=True)
class ClosetItemAdded:
    item: ClosetItem


@dataclass(frozen=True)
class OrderPlaced:
    pass


Intent = (
    Select
    | Navigate
    | Reset
    | GenerationStarted
    | GenerationCompleted
    | GenerationFailed
    | ChooseItem
    | BackToGeneration
    | RefinementStarted
    | RefinementCompleted
    | ClosetItemAdded
    | OrderPlaced
)
