import base64
import binascii

from fastapi import APIRouter, Depends, HTTPException

from atelier.api.v1.schemas import (
    ChooseRequestSchema,
    ClosetPhotoRequestSchema,
    CreateSessionRequestSchema,
    FlowStateSchema,
    NavigateRequestSchema,
    OptionSchema,
    RefineRequestSchema,
    SelectRequestSchema,
)
from atelier.application.exceptions import (
    AIContractError,
    AIUpstreamError,
    InvalidTransitionError,
    SessionNotFoundError,
)
from atelier.application.use_cases.flow_controller import FlowController
from atelier.domain.entities.flow_state import FlowState
from atelier.domain.entities.option import Dimension
from atelier.domain.entities.search import ImageRef
from atelier.wiring.dependencies import build_flow_controller, get_option_catalog, get_session_store

router = APIRouter()

CLIENT_ERRORS = (InvalidTransitionError, LookupError, ValueError, AIUpstreamError, AIContractError)


def http_error(e: Exception) -> HTTPException:
    if isinstance(e, InvalidTransitionError):
        return HTTPException(status_code=409, detail=str(e))
    if isinstance(e, LookupError):
        return HTTPException(status_code=404, detail=f"Not found: {e}")
    if isinstance(e, (AIUpstreamError, AIContractError)):
        return HTTPException(status_code=502, detail=str(e))
    return HTTPException(status_code=400, detail=str(e))


def decode_base64(payload: str, what: str) -> bytes:
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise ValueError(f"{what} is not valid base64.") from None


async def get_flow_controller(session_id: str) -> FlowController:
    try:
        return build_flow_controller(session_id)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=f"Unknown session: {e}")


def _response(controller: FlowController, state: FlowState) -> FlowStateSchema:
    return FlowStateSchema.from_state(controller.session_id, state, controller.visible_steps())


@router.post("/sessions", response_model=FlowStateSchema)
async def create_session(req: CreateSessionRequestSchema | None = None):
    session_id = get_session_store().get_or_create(req.session_id if req else None)
    controller = build_flow_controller(session_id)
    return _response(controller, controller.state())


@router.get("/sessions/{session_id}", response_model=FlowStateSchema)
async def get_session(controller: FlowController = Depends(get_flow_controller)):
    return _response(controller, controller.state())


@router.get("/catalog/{dimension}", response_model=list[OptionSchema])
async def list_options(dimension: Dimension, category: str | None = None):
    return [OptionSchema.model_validate(o) for o in get_option_catalog().list_options(dimension, category)]


@router.post("/sessions/{session_id}/select", response_model=FlowStateSchema)
async def select(req: SelectRequestSchema, controller: FlowController = Depends(get_flow_controller)):
    try:
        state = await controller.select(req.dimension, req.option_id)
    except CLIENT_ERRORS as e:
        raise http_error(e)
    return _response(controller, state)


@router.post("/sessions/{session_id}/navigate", response_model=FlowStateSchema)
async def navigate(req: NavigateRequestSchema, controller: FlowController = Depends(get_flow_controller)):
    try:
        state = controller.navigate(req.step)
    except CLIENT_ERRORS as e:
        raise http_error(e)
    return _response(controller, state)


@router.post("/sessions/{session_id}/generate", response_model=FlowStateSchema)
async def regenerate(controller: FlowController = Depends(get_flow_controller)):
    try:
        state = await controller.regenerate()
    except CLIENT_ERRORS as e:
        raise http_error(e)
    return _response(controller, state)


@router.post("/sessions/{session_id}/choose", response_model=FlowStateSchema)
async def choose(req: ChooseRequestSchema, controller: FlowController = Depends(get_flow_controller)):
    try:
        state = controller.choose(req.item_id)
    except CLIENT_ERRORS as e:
        raise http_error(e)
    return _response(controller, state)


@router.post("/sessions/{session_id}/back", response_model=FlowStateSchema)
async def back_to_generation(controller: FlowController = Depends(get_flow_controller)):
    try:
        state = controller.back_to_generation()
    except CLIENT_ERRORS as e:
        raise http_error(e)
    return _response(controller, state)


@router.post("/sessions/{session_id}/refine", response_model=FlowStateSchema)
async def refine(req: RefineRequestSchema, controller: FlowController = Depends(get_flow_controller)):
    try:
        audio = decode_base64(req.audio_base64, "audio_base64")
        state = await controller.refine(audio, req.mime_type)
    except CLIENT_ERRORS as e:
        raise http_error(e)
    return _response(controller, state)


@router.post("/sessions/{session_id}/reset", response_model=FlowStateSchema)
async def reset(controller: FlowController = Depends(get_flow_controller)):
    return _response(controller, controller.reset())


@router.post("/sessions/{session_id}/closet", response_model=FlowStateSchema)
async def add_closet_photo(req: ClosetPhotoRequestSchema, controller: FlowController = Depends(get_flow_controller)):
    try:
        image = ImageRef(data=decode_base64(req.image_base64, "image_base64"), mime_type=req.mime_type)
        state = await controller.add_closet_photo(image)
    except CLIENT_ERRORS as e:
        raise http_error(e)
    return _response(controller, state)


@router.post("/sessions/{session_id}/order", response_model=FlowStateSchema)
async def place_order(controller: FlowController = Depends(get_flow_controller)):
    try:
        state = controller.place_order()
    except CLIENT_ERRORS as e:
        raise http_error(e)
    return _response(controller, state)
