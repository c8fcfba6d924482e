from __future__ import annotations

import hashlib

from atelier.application.ports.ai_provider import AIProviderPort
from atelier.domain.entities.closet import ClosetAnalysis
from atelier.domain.entities.generated_item import ProductDetails, ProductInfo, ProductSpecs
from atelier.domain.entities.search import BespokeQuote, ImageRef, SearchLink


def _digest(text: str) -> int:
    return int(hashlib.sha256(text.encode("utf-8")).hexdigest()[:8], 16)


class MockAIProvider(AIProviderPort):
    """Deterministic offline provider, used when no API key is configured."""

    async def generate_image(self, prompt: str, aspect_ratio: str = "1:1") -> str:
        width, height = (600, 800) if aspect_ratio in ("3:4", "2:3", "9:16") else (600, 600)
        return f"https://picsum.photos/seed/{_digest(prompt):08x}/{width}/{height}"

    async def generate_details(self, prompt: str, closet_context: str | None = None) -> ProductDetails:
        seed = _digest(prompt)
        specs = ProductSpecs(
            comfort=40 + seed % 60,
            versatility=30 + (seed >> 4) % 70,
            trend=20 + (seed >> 8) % 80,
            warmth=10 + (seed >> 12) % 90,
            price_tier=(seed >> 16) % 101,
        )
        info = ProductInfo(
            name=f"Studio Piece {seed % 1000:03d}",
            description="A considered wardrobe piece generated for your brief.",
            styling_tips="Pair with clean basics and let it lead.",
            materials="Organic Cotton Blend",
        )
        match_score = 30 + (seed >> 20) % 71 if closet_context else None
        return ProductDetails(specs=specs, info=info, match_score=match_score)

    async def interpret_voice(self, audio: bytes, mime_type: str, context: str) -> str:
        return f"Apply the spoken change ({len(audio)} bytes of {mime_type}) to {context}"

    async def analyze_photo(self, image: ImageRef) -> ClosetAnalysis:
        return ClosetAnalysis(color="Navy", style="Casual", season="All", material="Cotton")

    async def visual_search(self, image: ImageRef) -> tuple[str, list[SearchLink]]:
        return (
            "A casual everyday garment; similar pieces are widely available.",
            [SearchLink(title="Similar item", uri="https://example.com/similar")],
        )

    async def estimate_bespoke_cost(self, image: ImageRef) -> BespokeQuote:
        return BespokeQuote(
            fabric_name="Italian Wool",
            fabric_cost=120,
            labor_hours=14,
            labor_cost=700,
            total_cost=984,
            timeline="4-6 weeks",
            complexity="High",
            comments="Mock estimate for local development.",
        )
