from __future__ import annotations

from dataclasses import replace

from atelier.domain.entities.flow_state import FlowState
from atelier.domain.entities.flow_step import FlowStep, GenerationStatus
from atelier.domain.entities.generated_item import GeneratedItem


def reset_flow_state(state: FlowState) -> FlowState:
    """Reset everything except the closet; bumps the epoch so in-flight results are discarded."""
    return FlowState(closet=state.closet, epoch=state.epoch + 1, updated_at=state.updated_at)


def discard_generation(state: FlowState) -> FlowState:
    """Drop candidates, selected item and any in-flight generation."""
    return replace(
        state,
        status=GenerationStatus.IDLE,
        candidates=(),
        selected_item=None,
        epoch=state.epoch + 1,
        last_modification=None,
        order_placed=False,
    )


def start_generation(state: FlowState) -> FlowState:
    return replace(
        state,
        step=FlowStep.GENERATION,
        status=GenerationStatus.GENERATING,
        candidates=(),
        selected_item=None,
        epoch=state.epoch + 1,
        last_modification=None,
        order_placed=False,
    )


def replace_candidate(state: FlowState, item: GeneratedItem) -> FlowState:
    """Swap the candidate sharing `item.id`, and the selected item when it is the same one."""
    candidates = tuple(item if c.id == item.id else c for c in state.candidates)
    selected = state.selected_item
    if selected is not None and selected.id == item.id:
        selected = item
    return replace(state, candidates=candidates, selected_item=selected)
