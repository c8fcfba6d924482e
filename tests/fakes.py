from __future__ import annotations

import asyncio
import re

from atelier.application.exceptions import AIUpstreamError
from atelier.application.ports.ai_provider import AIProviderPort
from atelier.application.use_cases.closet_registry import ClosetRegistry
from atelier.application.use_cases.flow_controller import FlowController
from atelier.application.use_cases.flow_reducer import FlowReducer
from atelier.application.use_cases.generate_batch import GenerationOrchestrator
from atelier.application.use_cases.refine_item import RefinementPipeline
from atelier.domain.entities.closet import ClosetAnalysis
from atelier.domain.entities.generated_item import ProductDetails, ProductInfo, ProductSpecs
from atelier.domain.entities.option import Dimension
from atelier.domain.entities.search import BespokeQuote, ImageRef, SearchLink
from atelier.infrastructure.catalog.option_catalog_store import StaticOptionCatalog
from atelier.infrastructure.store.memory_store import MemorySessionStore

PLACEHOLDER = "https://placeholder.test/garment.jpg"


def _variation(prompt: str) -> int:
    match = re.search(r"variation (\d+)", prompt)
    return int(match.group(1)) if match else 0


class ScriptedProvider(AIProviderPort):
    """
    Provider double with scripted latency and failures.

    - image_delays: seconds to wait per variation number (1-based)
    - fail: method names that raise AIUpstreamError
    - hang: method names that never return
    - gate: when set to an asyncio.Event, every call waits for it first
    """

    def __init__(
        self,
        image_delays: dict[int, float] | None = None,
        fail: tuple[str, ...] = (),
        hang: tuple[str, ...] = (),
        match_score: int | None = None,
        voice_reply: str = "make it darker",
        search_links: list[SearchLink] | None = None,
    ) -> None:
        self.image_delays = image_delays or {}
        self.fail = set(fail)
        self.hang = set(hang)
        self.match_score = match_score
        self.voice_reply = voice_reply
        self.search_links = search_links or []
        self.gate: asyncio.Event | None = None
        self.calls: list[str] = []
        self.image_prompts: list[str] = []
        self.detail_calls: list[tuple[str, str | None]] = []
        self.voice_contexts: list[str] = []

    async def _enter(self, method: str) -> None:
        self.calls.append(method)
        if self.gate is not None:
            await self.gate.wait()
        if method in self.hang:
            await asyncio.sleep(3600)
        if method in self.fail:
            raise AIUpstreamError(f"{method} unavailable")

    async def generate_image(self, prompt: str, aspect_ratio: str = "1:1") -> str:
        self.image_prompts.append(prompt)
        await self._enter("generate_image")
        variation = _variation(prompt)
        await asyncio.sleep(self.image_delays.get(variation, 0))
        if variation:
            return f"https://img.test/variation-{variation}.png"
        return f"https://img.test/refined-{len(self.image_prompts)}.png"

    async def generate_details(self, prompt: str, closet_context: str | None = None) -> ProductDetails:
        self.detail_calls.append((prompt, closet_context))
        await self._enter("generate_details")
        return ProductDetails(
            specs=ProductSpecs(comfort=61, versatility=72, trend=43, warmth=35, price_tier=20),
            info=ProductInfo(
                name="Scripted Tee",
                description="A scripted garment.",
                styling_tips="Wear it with denim.",
                materials="100% Cotton",
            ),
            match_score=self.match_score,
        )

    async def interpret_voice(self, audio: bytes, mime_type: str, context: str) -> str:
        self.voice_contexts.append(context)
        await self._enter("interpret_voice")
        return self.voice_reply

    async def analyze_photo(self, image: ImageRef) -> ClosetAnalysis:
        await self._enter("analyze_photo")
        return ClosetAnalysis(color="Black", style="Formal", season="Winter", material="Wool")

    async def visual_search(self, image: ImageRef) -> tuple[str, list[SearchLink]]:
        await self._enter("visual_search")
        return "A black wool overcoat.", list(self.search_links)

    async def estimate_bespoke_cost(self, image: ImageRef) -> BespokeQuote:
        await self._enter("estimate_bespoke_cost")
        return BespokeQuote(
            fabric_name="Cashmere",
            fabric_cost=300,
            labor_hours=20,
            labor_cost=1000,
            total_cost=1560,
            timeline="6-8 weeks",
            complexity="Masterpiece",
            comments="Hand finished.",
        )


def build_controller(
    provider: AIProviderPort,
    batch_size: int = 4,
    call_timeout: float | None = None,
    history_limit: int = 10,
) -> FlowController:
    store = MemorySessionStore()
    session_id = store.get_or_create(None)
    catalog = StaticOptionCatalog()
    return FlowController(
        session_id=session_id,
        store=store,
        catalog=catalog,
        reducer=FlowReducer(catalog, history_limit=history_limit),
        orchestrator=GenerationOrchestrator(
            provider,
            batch_size=batch_size,
            placeholder_image_url=PLACEHOLDER,
            call_timeout=call_timeout,
        ),
        refinement=RefinementPipeline(provider, placeholder_image_url=PLACEHOLDER, call_timeout=call_timeout),
        closet=ClosetRegistry(provider, call_timeout=call_timeout),
    )


async def select_until_mood(controller: FlowController, category: str = "tops", sub_category: str | None = "tshirt"):
    await controller.select(Dimension.TARGET, "womens")
    await controller.select(Dimension.CATEGORY, category)
    if sub_category:
        await controller.select(Dimension.SUB_CATEGORY, sub_category)
    return await controller.select(Dimension.STYLE_PRESET, "minimal")


async def let_tasks_run(rounds: int = 5) -> None:
    for _ in range(rounds):
        await asyncio.sleep(0)

