from pydantic import BaseModel, ConfigDict, Field

from atelier.domain.entities.flow_state import FlowState
from atelier.domain.entities.flow_step import FlowStep, GenerationStatus
from atelier.domain.entities.option import Dimension


class OptionSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    label: str
    description: str | None = None
    image: str | None = None


class SpecsSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    comfort: int
    versatility: int
    trend: int
    warmth: int
    price_tier: int


class InfoSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    description: str
    styling_tips: str
    materials: str


class GeneratedItemSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    image_url: str
    info: InfoSchema
    specs: SpecsSchema
    match_score: int | None = None
    modifications: list[str] = Field(default_factory=list)


class ClosetAnalysisSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    color: str
    style: str
    season: str
    material: str


class ClosetItemSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    image_url: str
    analysis: ClosetAnalysisSchema


class FlowStateSchema(BaseModel):
    session_id: str
    step: FlowStep
    status: GenerationStatus
    visible_steps: list[FlowStep]
    selection: dict[str, OptionSchema | None]
    candidates: list[GeneratedItemSchema]
    selected_item: GeneratedItemSchema | None = None
    closet: list[ClosetItemSchema]
    epoch: int
    last_modification: str | None = None
    order_placed: bool = False

    @classmethod
    def from_state(cls, session_id: str, state: FlowState, visible: list[FlowStep]) -> "FlowStateSchema":
        return cls(
            session_id=session_id,
            step=state.step,
            status=state.status,
            visible_steps=visible,
            selection={
                key: OptionSchema.model_validate(option) if option else None
                for key, option in state.selection.as_dict().items()
            },
            candidates=[GeneratedItemSchema.model_validate(item) for item in state.candidates],
            selected_item=(
                GeneratedItemSchema.model_validate(state.selected_item) if state.selected_item else None
            ),
            closet=[ClosetItemSchema.model_validate(item) for item in state.closet],
            epoch=state.epoch,
            last_modification=state.last_modification,
            order_placed=state.order_placed,
        )


class CreateSessionRequestSchema(BaseModel):
    session_id: str | None = None


class SelectRequestSchema(BaseModel):
    dimension: Dimension
    option_id: str = Field(min_length=1)


class NavigateRequestSchema(BaseModel):
    step: FlowStep


class ChooseRequestSchema(BaseModel):
    item_id: str = Field(min_length=1)


class RefineRequestSchema(BaseModel):
    audio_base64: str
    mime_type: str = "audio/wav"


class ClosetPhotoRequestSchema(BaseModel):
    image_base64: str
    mime_type: str = "image/jpeg"


class ImageRequestSchema(BaseModel):
    """One of: inline bytes, a URL, or a generated item borrowed from a session."""

    image_base64: str | None = None
    image_url: str | None = None
    mime_type: str = "image/jpeg"
    session_id: str | None = None
    item_id: str | None = None


class SearchLinkSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    title: str
    uri: str


class SearchResultSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    description: str
    links: list[SearchLinkSchema]
    fallback_search_url: str | None = None


class BespokeQuoteSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    fabric_name: str
    fabric_cost: float
    labor_hours: float
    labor_cost: float
    total_cost: float
    timeline: str
    complexity: str
    comments: str
