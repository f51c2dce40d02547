"""
Web search enrichment for wines Wine Labs could not match.

Every unmatched query gets its own concurrent web search. Results above
Config.WEB_SEARCH_ACCEPT_THRESHOLD (0-100 scale) upgrade the match in place;
their confidence is rescaled to 0-1 so downstream code sees one scale.
"""

import asyncio
import logging
from typing import Optional

from ..config import Config
from ..models.enums import DataSource
from .web_search import WebSearchService, WebSearchWineResult
from .wine_records import MatchCandidate

logger = logging.getLogger(__name__)


def web_confidence_to_unit(confidence: float) -> float:
    """Convert a 0-100 web search confidence to the pipeline's 0-1 scale."""
    return min(1.0, max(0.0, confidence / 100.0))


class FallbackEnricher:
    """
    Upgrades unmatched MatchCandidates using web search.

    Failures never propagate: a failed search leaves its entry unmatched,
    and a failure of the whole step returns the matches unchanged.
    """

    def __init__(
        self,
        web_search: WebSearchService,
        accept_threshold: float = Config.WEB_SEARCH_ACCEPT_THRESHOLD,
    ):
        """
        Initialize enricher.

        Args:
            web_search: Backend used for per-wine searches.
            accept_threshold: Minimum web confidence (exclusive, 0-100) to accept.
        """
        self.web_search = web_search
        self.accept_threshold = accept_threshold

    async def enrich(
        self,
        queries: list[str],
        matches: list[MatchCandidate]
    ) -> list[MatchCandidate]:
        """
        Fill in unmatched entries from web search.

        Args:
            queries: Original queries, aligned with ``matches``
            matches: WineMatcher.match_batch output

        Returns:
            The same list (same length and order), possibly with upgraded entries
        """
        unmatched = [i for i, m in enumerate(matches) if not m.matched]
        if not unmatched:
            return matches

        logger.info(f"Searching web for {len(unmatched)} unmatched wines")

        try:
            results = await asyncio.gather(
                *(self.web_search.search_wine(queries[i]) for i in unmatched),
                return_exceptions=True,
            )
        except Exception as e:
            logger.error(f"Web search fallback failed, keeping original matches: {e}", exc_info=True)
            return matches

        accepted = 0
        for idx, result in zip(unmatched, results):
            if isinstance(result, BaseException):
                logger.warning(f"Web search failed for {queries[idx]!r}: {result}")
                continue
            if self._apply(matches[idx], result):
                accepted += 1

        good = sum(
            1 for r in results
            if isinstance(r, WebSearchWineResult) and r.confidence > Config.WEB_SEARCH_GOOD_CONFIDENCE
        )
        logger.info(
            f"Web search: accepted {accepted}/{len(unmatched)} "
            f"({good} with good confidence)"
        )
        return matches

    def _apply(self, match: MatchCandidate, result: Optional[WebSearchWineResult]) -> bool:
        """Overwrite ``match`` from ``result`` if it clears the threshold."""
        if result is None or result.confidence <= self.accept_threshold:
            return False

        match.display_name = result.wine_name
        match.vintage = result.vintage
        match.varietal = result.varietal
        match.region = result.region
        match.web_search_price = result.average_price
        match.web_search_source = result.price_source
        match.matched = True
        match.data_source = DataSource.WEB_SEARCH
        match.confidence = web_confidence_to_unit(result.confidence)
        return True
