from abc import ABC, abstractmethod

from atelier.domain.entities.closet import ClosetAnalysis
from atelier.domain.entities.generated_item import ProductDetails
from atelier.domain.entities.search import BespokeQuote, ImageRef, SearchLink


class AIProviderPort(ABC):
    """
    Asynchronous contract with the generative AI provider.

    Adapters either return a value honouring the contract or raise:
        AIUpstreamError: networking/provider failures
        AIContractError: invalid JSON, wrong schema or empty output
    Fallback values are applied by the caller, never by the adapter.
    """

    @abstractmethod
    async def generate_image(self, prompt: str, aspect_ratio: str = "1:1") -> str:
        """
        Generate one product image.

        Returns:
            Image reference usable by a front end: http(s) URL or data: URL
        """
        raise NotImplementedError

    @abstractmethod
    async def generate_details(self, prompt: str, closet_context: str | None = None) -> ProductDetails:
        """
        Generate structured product details for a design brief.

        Requirements:
        - specs values are integers within 0-100
        - match_score must only be filled when `closet_context` is given
        """
        raise NotImplementedError

    @abstractmethod
    async def interpret_voice(self, audio: bytes, mime_type: str, context: str) -> str:
        """Turn a spoken refinement request into a short design-change instruction."""
        raise NotImplementedError

    @abstractmethod
    async def analyze_photo(self, image: ImageRef) -> ClosetAnalysis:
        raise NotImplementedError

    @abstractmethod
    async def visual_search(self, image: ImageRef) -> tuple[str, list[SearchLink]]:
        """
        Identify the item in `image` and find similar items online.

        Returns:
            Tuple of (shopper-facing description, raw links in provider order).
            Links may contain duplicates; the caller de-duplicates.
        """
        raise NotImplementedError

    @abstractmethod
    async def estimate_bespoke_cost(self, image: ImageRef) -> BespokeQuote:
        raise NotImplementedError
