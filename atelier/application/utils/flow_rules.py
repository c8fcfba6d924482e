from __future__ import annotations

from atelier.application.ports.option_catalog import OptionCatalogPort
from atelier.domain.entities.flow_state import FlowState
from atelier.domain.entities.flow_step import SELECTION_STEPS, FlowStep
from atelier.domain.entities.option import Dimension
from atelier.domain.entities.selection_state import SelectionState

STEP_ORDER: tuple[FlowStep, ...] = SELECTION_STEPS + (FlowStep.GENERATION, FlowStep.DETAIL)

STEP_DIMENSIONS: dict[FlowStep, Dimension] = {
    FlowStep.TARGET_SELECT: Dimension.TARGET,
    FlowStep.CATEGORY_SELECT: Dimension.CATEGORY,
    FlowStep.SUB_CATEGORY_SELECT: Dimension.SUB_CATEGORY,
    FlowStep.STYLE_SELECT: Dimension.STYLE_PRESET,
    FlowStep.MOOD_SELECT: Dimension.MOOD,
}


def step_index(step: FlowStep) -> int:
    return STEP_ORDER.index(step)


def category_has_sub_categories(selection: SelectionState, catalog: OptionCatalogPort) -> bool:
    return bool(selection.category and catalog.has_sub_categories(selection.category.id))


def prerequisite(dimension: Dimension, selection: SelectionState, catalog: OptionCatalogPort) -> Dimension | None:
    """The dimension that must hold a value before `dimension` may be selected."""
    if dimension == Dimension.TARGET:
        return None
    if dimension == Dimension.CATEGORY:
        return Dimension.TARGET
    if dimension == Dimension.SUB_CATEGORY:
        return Dimension.CATEGORY
    if dimension == Dimension.STYLE_PRESET:
        if selection.category and not category_has_sub_categories(selection, catalog):
            return Dimension.CATEGORY
        return Dimension.SUB_CATEGORY
    return Dimension.STYLE_PRESET


def prerequisite_met(dimension: Dimension, selection: SelectionState, catalog: OptionCatalogPort) -> bool:
    required = prerequisite(dimension, selection, catalog)
    return required is None or selection.has(required)


def next_step(dimension: Dimension, selection: SelectionState, catalog: OptionCatalogPort) -> FlowStep:
    """Step that follows a selection of `dimension` (sub-category is skipped when empty)."""
    if dimension == Dimension.TARGET:
        return FlowStep.CATEGORY_SELECT
    if dimension == Dimension.CATEGORY:
        if category_has_sub_categories(selection, catalog):
            return FlowStep.SUB_CATEGORY_SELECT
        return FlowStep.STYLE_SELECT
    if dimension == Dimension.SUB_CATEGORY:
        return FlowStep.STYLE_SELECT
    if dimension == Dimension.STYLE_PRESET:
        return FlowStep.MOOD_SELECT
    return FlowStep.GENERATION


def visible_steps(state: FlowState, catalog: OptionCatalogPort) -> list[FlowStep]:
    """
    Steps a front end should display, in flow order.

    A selection step is shown when it is the current step or when the
    selection already holds a value for it, so completed steps stay
    reviewable.
    """
    visible: list[FlowStep] = []
    for step, dimension in STEP_DIMENSIONS.items():
        if step == state.step or state.selection.has(dimension):
            visible.append(step)
    if state.step in (FlowStep.GENERATION, FlowStep.DETAIL):
        visible.append(FlowStep.GENERATION)
    if state.step == FlowStep.DETAIL and state.selected_item is not None:
        visible.append(FlowStep.DETAIL)
    return visible
