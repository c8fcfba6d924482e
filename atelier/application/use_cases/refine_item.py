from __future__ import annotations

import logging
from dataclasses import dataclass

from atelier.application.ports.ai_provider import AIProviderPort
from atelier.application.use_cases.prompt_composer import compose_refinement_prompt, refinement_context
from atelier.application.utils.fallbacks import (
    NO_CHANGE_MODIFICATION,
    VOICE_ERROR_MODIFICATION,
    call_with_fallback,
)
from atelier.domain.entities.selection_state import SelectionState


@dataclass(frozen=True)
class RefinementOutcome:
    modification: str
    image_url: str


class RefinementPipeline:
    """
    Voice-driven refinement of the selected item.

    Stages run in order with no rollback: interpret the utterance, then
    regenerate the image. Committing the patch is left to the caller so the
    result can be checked against the current epoch first.
    """

    def __init__(
        self,
        provider: AIProviderPort,
        aspect_ratio: str = "1:1",
        placeholder_image_url: str = "",
        call_timeout: float | None = None,
    ) -> None:
        self._provider = provider
        self._aspect_ratio = aspect_ratio
        self._placeholder_image_url = placeholder_image_url
        self._call_timeout = call_timeout
        self._logger = logging.getLogger(__name__)

    async def run(self, selection: SelectionState, audio: bytes, mime_type: str = "audio/wav") -> RefinementOutcome:
        context = refinement_context(selection)

        modification = await call_with_fallback(
            self._provider.interpret_voice(audio, mime_type, context),
            fallback=VOICE_ERROR_MODIFICATION,
            what="interpret_voice",
            timeout=self._call_timeout,
        )
        modification = (modification or "").strip() or NO_CHANGE_MODIFICATION
        self._logger.info("Voice interpreted", extra={"reason": modification})

        image_url = await call_with_fallback(
            self._provider.generate_image(compose_refinement_prompt(context, modification), self._aspect_ratio),
            fallback=self._placeholder_image_url,
            what="generate_image",
            timeout=self._call_timeout,
        )
        return RefinementOutcome(modification=modification, image_url=image_url or self._placeholder_image_url)
