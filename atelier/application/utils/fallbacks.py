"""Bounded-fallback wrapper around every AI provider call.

Each call site owns a total, static fallback value; provider failures never
reach the flow state machine.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, TypeVar

from atelier.domain.entities.closet import ClosetAnalysis
from atelier.domain.entities.generated_item import ProductDetails, ProductInfo, ProductSpecs
from atelier.domain.entities.search import BespokeQuote

T = TypeVar("T")

logger = logging.getLogger(__name__)

DEFAULT_SPECS = ProductSpecs(comfort=80, versatility=80, trend=50, warmth=50, price_tier=50)
DEFAULT_INFO = ProductInfo(
    name="Classic Staple",
    description="A timeless piece for any wardrobe.",
    styling_tips="Versatile enough for any occasion.",
    materials="Cotton Blend",
)
DEFAULT_MATCH_SCORE = 50

VOICE_ERROR_MODIFICATION = "Error processing voice"
NO_CHANGE_MODIFICATION = "No change detected"

UNKNOWN_ANALYSIS = ClosetAnalysis(color="Unknown", style="Unknown", season="All", material="Unknown")

SEARCH_FALLBACK_DESCRIPTION = "Could not perform visual search at this time."

STANDARD_QUOTE = BespokeQuote(
    fabric_name="Standard Fabric",
    fabric_cost=50,
    labor_hours=10,
    labor_cost=500,
    total_cost=650,
    timeline="4 weeks",
    complexity="Medium",
    comments="Estimation failed, using standard values.",
)


def default_details(with_match_score: bool) -> ProductDetails:
    return ProductDetails(
        specs=DEFAULT_SPECS,
        info=DEFAULT_INFO,
        match_score=DEFAULT_MATCH_SCORE if with_match_score else None,
    )


async def call_with_fallback(
    call: Awaitable[T],
    fallback: T,
    what: str,
    timeout: float | None = None,
) -> T:
    """
    Await `call`, returning `fallback` on any failure or timeout.

    Args:
        call: The provider coroutine
        fallback: Value returned when the call raises or times out
        what: Short call name for logs
        timeout: Seconds before giving up; None or <= 0 waits indefinitely
    """
    try:
        if timeout and timeout > 0:
            return await asyncio.wait_for(call, timeout=timeout)
        return await call
    except asyncio.CancelledError:
        raise
    except asyncio.TimeoutError:
        logger.warning("AI call timed out, using fallback", extra={"reason": f"{what}: timeout after {timeout}s"})
        return fallback
    except Exception as e:
        logger.warning("AI call failed, using fallback", extra={"reason": f"{what}: {e}"})
        return fallback
