from enum import Enum


class FlowStep(str, Enum):
    TARGET_SELECT = "TARGET_SELECT"
    CATEGORY_SELECT = "CATEGORY_SELECT"
    SUB_CATEGORY_SELECT = "SUB_CATEGORY_SELECT"
    STYLE_SELECT = "STYLE_SELECT"
    MOOD_SELECT = "MOOD_SELECT"
    GENERATION = "GENERATION"
    DETAIL = "DETAIL"


class GenerationStatus(str, Enum):
    IDLE = "idle"
    GENERATING = "generating"
    COMPLETE = "complete"
    ERROR = "error"


SELECTION_STEPS: tuple[FlowStep, ...] = (
    FlowStep.TARGET_SELECT,
    FlowStep.CATEGORY_SELECT,
    FlowStep.SUB_CATEGORY_SELECT,
    FlowStep.STYLE_SELECT,
    FlowStep.MOOD_SELECT,
)
