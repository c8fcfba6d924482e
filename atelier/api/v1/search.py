from fastapi import APIRouter, Depends

from atelier.api.v1.flow import CLIENT_ERRORS, decode_base64, http_error
from atelier.api.v1.schemas import BespokeQuoteSchema, ImageRequestSchema, SearchResultSchema
from atelier.application.exceptions import UnknownItemError
from atelier.application.use_cases.visual_search import VisualSearchUseCase
from atelier.domain.entities.search import ImageRef
from atelier.wiring.dependencies import get_session_store, get_visual_search_use_case

router = APIRouter()


def resolve_image(req: ImageRequestSchema) -> ImageRef:
    if req.image_base64:
        return ImageRef(data=decode_base64(req.image_base64, "image_base64"), mime_type=req.mime_type)
    if req.image_url:
        return ImageRef(url=req.image_url, mime_type=req.mime_type)
    if req.session_id and req.item_id:
        state = get_session_store().get_state(req.session_id)
        item = state.candidate(req.item_id)
        if item is None and state.selected_item is not None and state.selected_item.id == req.item_id:
            item = state.selected_item
        if item is None:
            raise UnknownItemError(req.item_id)
        return ImageRef(url=item.image_url)
    return ImageRef()


@router.post("/visual-search", response_model=SearchResultSchema)
async def visual_search(
    req: ImageRequestSchema,
    uc: VisualSearchUseCase = Depends(get_visual_search_use_case),
):
    try:
        result = await uc.search(resolve_image(req))
    except CLIENT_ERRORS as e:
        raise http_error(e)
    return SearchResultSchema.model_validate(result)


@router.post("/bespoke-quote", response_model=BespokeQuoteSchema)
async def bespoke_quote(
    req: ImageRequestSchema,
    uc: VisualSearchUseCase = Depends(get_visual_search_use_case),
):
    try:
        quote = await uc.quote(resolve_image(req))
    except CLIENT_ERRORS as e:
        raise http_error(e)
    return BespokeQuoteSchema.model_validate(quote)
