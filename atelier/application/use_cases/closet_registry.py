from __future__ import annotations

import logging
import uuid

from atelier.application.exceptions import InputUnavailableError
from atelier.application.ports.ai_provider import AIProviderPort
from atelier.application.utils.fallbacks import UNKNOWN_ANALYSIS, call_with_fallback
from atelier.domain.entities.closet import ClosetAnalysis, ClosetItem
from atelier.domain.entities.search import ImageRef


class ClosetRegistry:
    """Analyze wardrobe photos into closet items. The collection itself lives in FlowState."""

    def __init__(self, provider: AIProviderPort, call_timeout: float | None = None) -> None:
        self._provider = provider
        self._call_timeout = call_timeout
        self._logger = logging.getLogger(__name__)

    async def analyze(self, image: ImageRef) -> ClosetAnalysis:
        return await call_with_fallback(
            self._provider.analyze_photo(image),
            fallback=UNKNOWN_ANALYSIS,
            what="analyze_photo",
            timeout=self._call_timeout,
        )

    async def build_item(self, image: ImageRef) -> ClosetItem:
        if image.is_empty():
            raise InputUnavailableError("No photo was provided.")
        analysis = await self.analyze(image)
        item = ClosetItem(id=uuid.uuid4().hex, image_url=image.as_url(), analysis=analysis)
        self._logger.info("Closet item analyzed", extra={"item_id": item.id})
        return item
