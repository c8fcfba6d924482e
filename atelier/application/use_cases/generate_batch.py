from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Sequence

from atelier.application.ports.ai_provider import AIProviderPort
from atelier.application.use_cases.prompt_composer import (
    closet_context as build_closet_context,
    compose_detail_prompt,
    compose_image_prompt,
)
from atelier.application.utils.fallbacks import call_with_fallback, default_details
from atelier.domain.entities.closet import ClosetItem
from atelier.domain.entities.generated_item import GeneratedItem
from atelier.domain.entities.selection_state import SelectionState

MAX_BATCH_SIZE = 8


class GenerationOrchestrator:
    """Fan out one image call and one detail call per slot, join all slots in slot order."""

    def __init__(
        self,
        provider: AIProviderPort,
        batch_size: int = 4,
        aspect_ratio: str = "1:1",
        placeholder_image_url: str = "",
        call_timeout: float | None = None,
    ) -> None:
        self._provider = provider
        self._batch_size = min(max(1, int(batch_size)), MAX_BATCH_SIZE)
        self._aspect_ratio = aspect_ratio
        self._placeholder_image_url = placeholder_image_url
        self._call_timeout = call_timeout
        self._logger = logging.getLogger(__name__)

    @property
    def batch_size(self) -> int:
        return self._batch_size

    async def generate_batch(
        self,
        selection: SelectionState,
        closet: Sequence[ClosetItem],
    ) -> list[GeneratedItem]:
        batch_token = uuid.uuid4().hex
        context = build_closet_context(closet)
        detail_prompt = compose_detail_prompt(selection, context)

        # gather keeps argument order, so completion order never leaks into the list.
        return list(
            await asyncio.gather(
                *(
                    self._generate_slot(index, batch_token, selection, detail_prompt, context)
                    for index in range(self._batch_size)
                )
            )
        )

    async def _generate_slot(
        self,
        index: int,
        batch_token: str,
        selection: SelectionState,
        detail_prompt: str,
        context: str | None,
    ) -> GeneratedItem:
        item_id = f"gen-{batch_token}-{index}"
        fallback = self._default_item(item_id, context)
        try:
            image_url, details = await asyncio.gather(
                call_with_fallback(
                    self._provider.generate_image(compose_image_prompt(selection, index), self._aspect_ratio),
                    fallback=self._placeholder_image_url,
                    what="generate_image",
                    timeout=self._call_timeout,
                ),
                call_with_fallback(
                    self._provider.generate_details(detail_prompt, context),
                    fallback=default_details(with_match_score=context is not None),
                    what="generate_details",
                    timeout=self._call_timeout,
                ),
            )
            item = GeneratedItem(
                id=item_id,
                image_url=image_url or self._placeholder_image_url,
                info=details.info,
                specs=details.specs,
                # No closet context means no compatibility score, whatever the provider said.
                match_score=details.match_score if context is not None else None,
            )
        except Exception as e:
            self._logger.warning("Slot failed, using default item", extra={"slot": index, "reason": str(e)})
            return fallback
        return item

    def _default_item(self, item_id: str, context: str | None) -> GeneratedItem:
        details = default_details(with_match_score=context is not None)
        return GeneratedItem(
            id=item_id,
            image_url=self._placeholder_image_url,
            info=details.info,
            specs=details.specs,
            match_score=details.match_score,
        )
