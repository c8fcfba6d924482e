from __future__ import annotations

import logging
from dataclasses import replace

from atelier.application.exceptions import (
    GenerationInProgressError,
    InvalidTransitionError,
    UnknownItemError,
)
from atelier.application.ports.option_catalog import OptionCatalogPort
from atelier.application.use_cases.prompt_composer import fold_modification
from atelier.application.utils.flow_rules import (
    STEP_DIMENSIONS,
    category_has_sub_categories,
    next_step,
    prerequisite,
    prerequisite_met,
    step_index,
)
from atelier.application.utils.state_helpers import (
    discard_generation,
    replace_candidate,
    reset_flow_state,
    start_generation,
)
from atelier.domain.entities.flow_state import FlowState
from atelier.domain.entities.flow_step import FlowStep, GenerationStatus
from atelier.domain.entities.intents import (
    BackToGeneration,
    ChooseItem,
    ClosetItemAdded,
    GenerationCompleted,
    GenerationFailed,
    GenerationStarted,
    Intent,
    Navigate,
    OrderPlaced,
    RefinementCompleted,
    RefinementStarted,
    Reset,
    Select,
)
from atelier.domain.entities.option import Dimension


class FlowReducer:
    """
    Pure state transitions for one session.

    `reduce` either returns the next FlowState or raises before anything is
    mutated. Completion intents carrying a stale epoch return the state
    unchanged.
    """

    def __init__(self, catalog: OptionCatalogPort, history_limit: int = 10) -> None:
        self._catalog = catalog
        self._history_limit = max(1, history_limit)
        self._logger = logging.getLogger(__name__)

    def reduce(self, state: FlowState, intent: Intent) -> FlowState:
        if isinstance(intent, Select):
            return self._select(state, intent)
        if isinstance(intent, Navigate):
            return self._navigate(state, intent)
        if isinstance(intent, Reset):
            return reset_flow_state(state)
        if isinstance(intent, GenerationStarted):
            return self._generation_started(state)
        if isinstance(intent, GenerationCompleted):
            if self._is_stale(state, intent.epoch, "generation_completed"):
                return state
            return replace(state, status=GenerationStatus.COMPLETE, candidates=tuple(intent.items))
        if isinstance(intent, GenerationFailed):
            if self._is_stale(state, intent.epoch, "generation_failed"):
                return state
            return replace(state, status=GenerationStatus.ERROR)
        if isinstance(intent, ChooseItem):
            return self._choose(state, intent)
        if isinstance(intent, BackToGeneration):
            if state.step != FlowStep.DETAIL:
                raise InvalidTransitionError("Back to generation is only possible from the detail step.")
            return replace(state, step=FlowStep.GENERATION, selected_item=None)
        if isinstance(intent, RefinementStarted):
            return self._refinement_started(state)
        if isinstance(intent, RefinementCompleted):
            return self._refinement_completed(state, intent)
        if isinstance(intent, ClosetItemAdded):
            return replace(state, closet=state.closet + (intent.item,))
        if isinstance(intent, OrderPlaced):
            if state.step != FlowStep.DETAIL or state.selected_item is None:
                raise InvalidTransitionError("An order needs a selected item in the detail step.")
            if state.status == GenerationStatus.GENERATING:
                raise GenerationInProgressError("Wait for the refinement to finish before ordering.")
            return replace(state, order_placed=True)
        raise InvalidTransitionError(f"Unsupported intent: {type(intent).__name__}")

    def _select(self, state: FlowState, intent: Select) -> FlowState:
        dimension = intent.dimension
        if not prerequisite_met(dimension, state.selection, self._catalog):
            required = prerequisite(dimension, state.selection, self._catalog)
            raise InvalidTransitionError(
                f"Cannot select {dimension.value} before {required.value if required else 'nothing'}."
            )
        if dimension == Dimension.MOOD and state.status == GenerationStatus.GENERATING:
            raise GenerationInProgressError("A generation is already running.")

        previous = state.selection.get(dimension)
        selection = state.selection.with_value(dimension, intent.option)

        if previous is not None and previous != intent.option and dimension != Dimension.MOOD:
            # Upstream change: stale downstream choices must not reach prompt composition.
            selection = selection.without_downstream(dimension)
            cleared = discard_generation(state)
            return replace(cleared, selection=selection, step=next_step(dimension, selection, self._catalog))

        step = next_step(dimension, selection, self._catalog)
        if previous == intent.option and step_index(state.step) > step_index(step):
            step = state.step
        return replace(state, selection=selection, step=step)

    def _navigate(self, state: FlowState, intent: Navigate) -> FlowState:
        target = intent.step
        if target not in STEP_DIMENSIONS:
            raise InvalidTransitionError(f"Cannot navigate to {target.value}.")
        if step_index(target) > step_index(state.step):
            raise InvalidTransitionError("Navigation only moves back to a reviewed step.")
        dimension = STEP_DIMENSIONS[target]
        if not prerequisite_met(dimension, state.selection, self._catalog):
            raise InvalidTransitionError(f"{target.value} is not reachable yet.")
        if target == FlowStep.SUB_CATEGORY_SELECT and not category_has_sub_categories(state.selection, self._catalog):
            raise InvalidTransitionError("The selected category has no sub-categories.")
        return replace(state, step=target)

    def _generation_started(self, state: FlowState) -> FlowState:
        if state.status == GenerationStatus.GENERATING:
            raise GenerationInProgressError("A generation is already running.")
        if state.selection.mood is None or not prerequisite_met(Dimension.MOOD, state.selection, self._catalog):
            raise InvalidTransitionError("Generation needs a complete selection.")
        return start_generation(state)

    def _choose(self, state: FlowState, intent: ChooseItem) -> FlowState:
        if state.status == GenerationStatus.GENERATING:
            raise GenerationInProgressError("Candidates are still being generated.")
        if state.step not in (FlowStep.GENERATION, FlowStep.DETAIL):
            raise InvalidTransitionError("No candidates to choose from.")
        item = state.candidate(intent.item_id)
        if item is None:
            raise UnknownItemError(intent.item_id)
        return replace(state, step=FlowStep.DETAIL, selected_item=item, order_placed=False)

    def _refinement_started(self, state: FlowState) -> FlowState:
        if state.selected_item is None:
            raise InvalidTransitionError("Refinement needs a selected item.")
        if state.status == GenerationStatus.GENERATING:
            raise GenerationInProgressError("A refinement is already running.")
        return replace(state, status=GenerationStatus.GENERATING, epoch=state.epoch + 1)

    def _refinement_completed(self, state: FlowState, intent: RefinementCompleted) -> FlowState:
        if self._is_stale(state, intent.epoch, "refinement_completed"):
            return state
        item = state.candidate(intent.item_id)
        if item is None and state.selected_item is not None and state.selected_item.id == intent.item_id:
            item = state.selected_item
        if item is None:
            return replace(state, status=GenerationStatus.COMPLETE)

        patched = replace(
            item,
            image_url=intent.image_url,
            info=replace(item.info, styling_tips=fold_modification(item.info.styling_tips, intent.modification)),
            modifications=(item.modifications + (intent.modification,))[-self._history_limit :],
        )
        state = replace_candidate(state, patched)
        return replace(state, status=GenerationStatus.COMPLETE, last_modification=intent.modification)

    def _is_stale(self, state: FlowState, epoch: int, what: str) -> bool:
        if epoch == state.epoch:
            return False
        self._logger.info(
            "Discarding stale result",
            extra={"reason": what, "epoch": epoch, "status": state.status.value},
        )
        return True
