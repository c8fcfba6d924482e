from __future__ import annotations

import logging
from urllib.parse import quote_plus

from atelier.application.exceptions import InputUnavailableError
from atelier.application.ports.ai_provider import AIProviderPort
from atelier.application.utils.fallbacks import (
    SEARCH_FALLBACK_DESCRIPTION,
    STANDARD_QUOTE,
    call_with_fallback,
)
from atelier.domain.entities.search import BespokeQuote, ImageRef, SearchLink, SearchResult

MANUAL_SEARCH_URL = "https://www.google.com/search?q={query}&tbm=shop"


def dedupe_links(links: list[SearchLink]) -> tuple[SearchLink, ...]:
    """Keep the first link per URI, preserving order."""
    seen: set[str] = set()
    unique: list[SearchLink] = []
    for link in links:
        uri = link.uri or "#"
        if uri in seen:
            continue
        seen.add(uri)
        unique.append(SearchLink(title=link.title or "Web Result", uri=uri))
    return tuple(unique)


class VisualSearchUseCase:
    """Stateless image lookups: similar items online and a bespoke cost estimate."""

    def __init__(self, provider: AIProviderPort, call_timeout: float | None = None) -> None:
        self._provider = provider
        self._call_timeout = call_timeout
        self._logger = logging.getLogger(__name__)

    async def search(self, image: ImageRef) -> SearchResult:
        if image.is_empty():
            raise InputUnavailableError("No image was provided.")
        description, links = await call_with_fallback(
            self._provider.visual_search(image),
            fallback=(SEARCH_FALLBACK_DESCRIPTION, []),
            what="visual_search",
            timeout=self._call_timeout,
        )
        description = description or "No description found."
        unique = dedupe_links(list(links or []))
        manual = None if unique else MANUAL_SEARCH_URL.format(query=quote_plus(description))
        self._logger.info("Visual search finished", extra={"reason": f"{len(unique)} links"})
        return SearchResult(description=description, links=unique, fallback_search_url=manual)

    async def quote(self, image: ImageRef) -> BespokeQuote:
        if image.is_empty():
            raise InputUnavailableError("No image was provided.")
        return await call_with_fallback(
            self._provider.estimate_bespoke_cost(image),
            fallback=STANDARD_QUOTE,
            what="estimate_bespoke_cost",
            timeout=self._call_timeout,
        )
