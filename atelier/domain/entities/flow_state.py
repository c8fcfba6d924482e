from __future__ import annotations

from dataclasses import dataclass, field

from atelier.domain.entities.closet import ClosetItem
from atelier.domain.entities.flow_step import FlowStep, GenerationStatus
from atelier.domain.entities.generated_item import GeneratedItem
from atelier.domain.entities.selection_state import SelectionState


@dataclass(frozen=True)
class FlowState:
    selection: SelectionState = SelectionState()
    step: FlowStep = FlowStep.TARGET_SELECT
    status: GenerationStatus = GenerationStatus.IDLE
    candidates: tuple[GeneratedItem, ...] = field(default_factory=tuple)
    selected_item: GeneratedItem | None = None
    closet: tuple[ClosetItem, ...] = field(default_factory=tuple)
    # Bumped on every generation start, upstream change and reset; results
    # carrying an older epoch are discarded.
    epoch: int = 0
    last_modification: str | None = None
    order_placed: bool = False
    updated_at: float | None = None

    def candidate(self, item_id: str) -> GeneratedItem | None:
        return next((item for item in self.candidates if item.id == item_id), None)
