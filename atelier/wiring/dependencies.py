from functools import lru_cache
import logging

from atelier.core.config import settings
from atelier.infrastructure.ai.mock_provider import MockAIProvider
from atelier.infrastructure.ai.openai_provider import OpenAIProvider
from atelier.infrastructure.catalog.option_catalog_store import StaticOptionCatalog
from atelier.infrastructure.store.memory_store import MemorySessionStore
from atelier.application.exceptions import SessionNotFoundError
from atelier.application.ports.ai_provider import AIProviderPort
from atelier.application.ports.option_catalog import OptionCatalogPort
from atelier.application.use_cases.closet_registry import ClosetRegistry
from atelier.application.use_cases.flow_controller import FlowController
from atelier.application.use_cases.flow_reducer import FlowReducer
from atelier.application.use_cases.generate_batch import GenerationOrchestrator
from atelier.application.use_cases.refine_item import RefinementPipeline
from atelier.application.use_cases.visual_search import VisualSearchUseCase


_session_store: MemorySessionStore | None = None


def _call_timeout() -> float | None:
    return settings.AI_CALL_TIMEOUT_SECONDS if settings.AI_CALL_TIMEOUT_SECONDS > 0 else None


@lru_cache
def get_ai_provider() -> AIProviderPort:
    logger = logging.getLogger(__name__)
    provider = settings.AI_PROVIDER.lower().strip()
    if provider == "mock":
        logger.info("Using MockAIProvider (AI_PROVIDER=mock)")
        return MockAIProvider()
    if provider == "openai" or (settings.OPENAI_API_KEY and settings.OPENAI_API_KEY.strip()):
        if not (settings.OPENAI_API_KEY and settings.OPENAI_API_KEY.strip()):
            raise ValueError("OPENAI_API_KEY is required when AI_PROVIDER=openai.")
        logger.info("Using OpenAIProvider")
        return OpenAIProvider()
    logger.info("Using MockAIProvider (OPENAI_API_KEY missing)")
    return MockAIProvider()


def get_session_store() -> MemorySessionStore:
    global _session_store
    if _session_store is None:
        _session_store = MemorySessionStore()
    return _session_store


@lru_cache
def get_option_catalog() -> OptionCatalogPort:
    return StaticOptionCatalog()


def get_flow_reducer() -> FlowReducer:
    return FlowReducer(catalog=get_option_catalog(), history_limit=settings.REFINEMENT_HISTORY_LIMIT)


def get_generation_orchestrator() -> GenerationOrchestrator:
    return GenerationOrchestrator(
        provider=get_ai_provider(),
        batch_size=settings.GENERATION_BATCH_SIZE,
        aspect_ratio=settings.IMAGE_ASPECT_RATIO,
        placeholder_image_url=settings.PLACEHOLDER_IMAGE_URL,
        call_timeout=_call_timeout(),
    )


def get_refinement_pipeline() -> RefinementPipeline:
    return RefinementPipeline(
        provider=get_ai_provider(),
        aspect_ratio=settings.IMAGE_ASPECT_RATIO,
        placeholder_image_url=settings.PLACEHOLDER_IMAGE_URL,
        call_timeout=_call_timeout(),
    )


def get_closet_registry() -> ClosetRegistry:
    return ClosetRegistry(provider=get_ai_provider(), call_timeout=_call_timeout())


def get_visual_search_use_case() -> VisualSearchUseCase:
    return VisualSearchUseCase(provider=get_ai_provider(), call_timeout=_call_timeout())


def build_flow_controller(session_id: str) -> FlowController:
    store = get_session_store()
    if not store.exists(session_id):
        raise SessionNotFoundError(session_id)
    return FlowController(
        session_id=session_id,
        store=store,
        catalog=get_option_catalog(),
        reducer=get_flow_reducer(),
        orchestrator=get_generation_orchestrator(),
        refinement=get_refinement_pipeline(),
        closet=get_closet_registry(),
    )
