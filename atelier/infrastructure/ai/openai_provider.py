from __future__ import annotations

import json
from typing import Any, Literal

from openai import AsyncOpenAI
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from atelier.application.exceptions import AIContractError, AIUpstreamError
from atelier.application.ports.ai_provider import AIProviderPort
from atelier.core.config import settings
from atelier.domain.entities.closet import ClosetAnalysis
from atelier.domain.entities.generated_item import ProductDetails, ProductInfo, ProductSpecs
from atelier.domain.entities.search import BespokeQuote, ImageRef, SearchLink
from atelier.infrastructure.ai.prompts import (
    ANALYZE_PHOTO_PROMPT,
    BESPOKE_PROMPT,
    DETAILS_SYSTEM,
    VISUAL_SEARCH_PROMPT,
    build_details_prompt,
    build_image_prompt,
    build_voice_prompt,
)

IMAGE_SIZES: dict[str, str] = {
    "1:1": "1024x1024",
    "3:4": "1024x1536",
    "2:3": "1024x1536",
    "9:16": "1024x1536",
    "4:3": "1536x1024",
    "3:2": "1536x1024",
    "16:9": "1536x1024",
}

AUDIO_EXTENSIONS: dict[str, str] = {
    "audio/wav": "wav",
    "audio/x-wav": "wav",
    "audio/webm": "webm",
    "audio/mpeg": "mp3",
    "audio/mp4": "m4a",
    "audio/ogg": "ogg",
}


class _SpecsPayload(BaseModel):
    comfort: int = Field(ge=0, le=100)
    versatility: int = Field(ge=0, le=100)
    trend: int = Field(ge=0, le=100)
    warmth: int = Field(ge=0, le=100)
    price_tier: int = Field(ge=0, le=100)


class _InfoPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1)
    description: str = ""
    styling_tips: str = Field(default="", alias="stylingTips")
    materials: str = ""


class _DetailsPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    specs: _SpecsPayload
    info: _InfoPayload
    match_score: int | None = Field(default=None, alias="matchScore", ge=0, le=100)


class _AnalysisPayload(BaseModel):
    color: str = "Unknown"
    style: str = "Unknown"
    season: str = "All"
    material: str = "Unknown"


class _QuotePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    fabric_name: str = Field(alias="fabricName")
    fabric_cost: float = Field(alias="fabricCost", ge=0)
    labor_hours: float = Field(alias="laborHours", ge=0)
    labor_cost: float = Field(alias="laborCost", ge=0)
    total_cost: float = Field(alias="totalCost", ge=0)
    timeline: str
    complexity: Literal["Low", "Medium", "High", "Masterpiece"]
    comments: str = ""


class OpenAIProvider(AIProviderPort):
    """
    OpenAI-backed adapter implementing AIProviderPort.

    Contract guarantees:
    - every method returns the port's declared type
    - Raises:
        AIUpstreamError: networking/provider failures
        AIContractError: invalid JSON, wrong schema/shape or empty output
    """

    def __init__(self, client: AsyncOpenAI | None = None) -> None:
        self.client = client or AsyncOpenAI(api_key=settings.OPENAI_API_KEY)

    async def generate_image(self, prompt: str, aspect_ratio: str = "1:1") -> str:
        try:
            resp = await self.client.images.generate(
                model=settings.OPENAI_MODEL_IMAGE,
                prompt=build_image_prompt(prompt),
                size=IMAGE_SIZES.get(aspect_ratio, "1024x1024"),
                n=1,
            )
        except Exception as e:
            raise AIUpstreamError(f"OpenAI image error: {e}") from e

        data = resp.data[0] if resp.data else None
        if data is not None and getattr(data, "b64_json", None):
            return f"data:image/png;base64,{data.b64_json}"
        if data is not None and getattr(data, "url", None):
            return str(data.url)
        raise AIContractError("Image: no image generated.")

    async def generate_details(self, prompt: str, closet_context: str | None = None) -> ProductDetails:
        text = await self._call_chat(
            model=settings.OPENAI_MODEL_DETAILS,
            messages=[
                {"role": "system", "content": DETAILS_SYSTEM},
                {"role": "user", "content": build_details_prompt(prompt, with_match_score=bool(closet_context))},
            ],
            temperature=settings.OPENAI_TEMPERATURE_DETAILS,
            use_json_mode=True,
        )
        payload = _validate(_DetailsPayload, _parse_json(text, what="details"), what="details")
        return ProductDetails(
            specs=ProductSpecs(**payload.specs.model_dump()),
            info=ProductInfo(**payload.info.model_dump()),
            match_score=payload.match_score if closet_context else None,
        )

    async def interpret_voice(self, audio: bytes, mime_type: str, context: str) -> str:
        extension = AUDIO_EXTENSIONS.get(mime_type, "wav")
        try:
            transcription = await self.client.audio.transcriptions.create(
                model=settings.OPENAI_MODEL_TRANSCRIBE,
                file=(f"utterance.{extension}", audio, mime_type),
            )
        except Exception as e:
            raise AIUpstreamError(f"OpenAI transcription error: {e}") from e

        transcript = (getattr(transcription, "text", "") or "").strip()
        if not transcript:
            raise AIContractError("Voice: empty transcription.")

        return await self._call_chat(
            model=settings.OPENAI_MODEL_DETAILS,
            messages=[{"role": "user", "content": build_voice_prompt(context, transcript)}],
            temperature=settings.OPENAI_TEMPERATURE_VOICE,
        )

    async def analyze_photo(self, image: ImageRef) -> ClosetAnalysis:
        text = await self._call_chat(
            model=settings.OPENAI_MODEL_VISION,
            messages=[_image_message(ANALYZE_PHOTO_PROMPT, image)],
            temperature=0.0,
            use_json_mode=True,
        )
        payload = _validate(_AnalysisPayload, _parse_json(text, what="analysis"), what="analysis")
        return ClosetAnalysis(**payload.model_dump())

    async def visual_search(self, image: ImageRef) -> tuple[str, list[SearchLink]]:
        try:
            resp = await self.client.responses.create(
                model=settings.OPENAI_MODEL_SEARCH,
                tools=[{"type": "web_search_preview"}],
                input=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "input_text", "text": VISUAL_SEARCH_PROMPT},
                            {"type": "input_image", "image_url": image.as_url()},
                        ],
                    }
                ],
            )
        except Exception as e:
            raise AIUpstreamError(f"OpenAI search error: {e}") from e

        description = (getattr(resp, "output_text", "") or "").strip()
        links: list[SearchLink] = []
        for item in getattr(resp, "output", None) or []:
            if getattr(item, "type", None) != "message":
                continue
            for part in getattr(item, "content", None) or []:
                for annotation in getattr(part, "annotations", None) or []:
                    if getattr(annotation, "type", None) != "url_citation":
                        continue
                    links.append(
                        SearchLink(
                            title=getattr(annotation, "title", None) or "Web Result",
                            uri=getattr(annotation, "url", None) or "#",
                        )
                    )
        return description, links

    async def estimate_bespoke_cost(self, image: ImageRef) -> BespokeQuote:
        text = await self._call_chat(
            model=settings.OPENAI_MODEL_VISION,
            messages=[_image_message(BESPOKE_PROMPT, image)],
            temperature=0.2,
            use_json_mode=True,
        )
        payload = _validate(_QuotePayload, _parse_json(text, what="quote"), what="quote")
        return BespokeQuote(**payload.model_dump())

    async def _call_chat(
        self,
        model: str,
        messages: list[dict[str, Any]],
        temperature: float,
        use_json_mode: bool = False,
    ) -> str:
        try:
            kwargs: dict[str, Any] = {
                "model": model,
                "messages": messages,
                "temperature": temperature,
                "max_tokens": 1400,
            }
            if use_json_mode:
                kwargs["response_format"] = {"type": "json_object"}

            resp = await self.client.chat.completions.create(**kwargs)
        except Exception as e:
            raise AIUpstreamError(f"OpenAI API error: {e}") from e

        content = (resp.choices[0].message.content or "").strip() if resp.choices else ""
        if not content:
            raise AIContractError("LLM returned empty response text.")

        return content


def _image_message(prompt: str, image: ImageRef) -> dict[str, Any]:
    return {
        "role": "user",
        "content": [
            {"type": "text", "text": prompt},
            {"type": "image_url", "image_url": {"url": image.as_url()}},
        ],
    }


def _parse_json(text: str, what: str) -> Any:
    try:
        return json.loads(text)
    except Exception:
        snippet = text[:200].replace("\n", " ")
        raise AIContractError(f"{what.capitalize()}: invalid JSON. Snippet: {snippet!r}")


def _validate(model: type[BaseModel], data: Any, what: str) -> Any:
    if not isinstance(data, dict):
        raise AIContractError(f"{what.capitalize()}: expected a JSON object.")
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise AIContractError(f"{what.capitalize()}: invalid shape: {e.error_count()} error(s)") from e
