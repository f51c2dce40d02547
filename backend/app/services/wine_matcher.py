"""
Wine name matching against the Wine Labs identity service.

Flow:
1. Preprocess every query (OCR cleanup, abbreviation expansion)
2. Send queries in chunks of Config.MATCH_CHUNK_SIZE (proxy time limit)
3. Pad short chunk responses so result[i] always answers queries[i]
4. Mark matches (any LWIN present) and estimate confidence

Wine Labs does not report match confidence, so it is estimated from token
overlap between the original query and the returned display name.
"""

import logging
from typing import Any, Optional

from ..config import Config
from ..models.enums import DataSource
from .query_normalizer import normalize_query
from .wine_records import MatchCandidate
from .winelabs_client import WineLabsClient

logger = logging.getLogger(__name__)


def score_match_confidence(original_query: str, matched_name: Optional[str]) -> float:
    """
    Estimate how likely ``matched_name`` is the wine ``original_query`` names.

    Coarse banded heuristic, always in [0, 1]:
    - no matched name → 0.0
    - equal after case-folding/trimming → 1.0
    - otherwise the share of query words (3+ chars) found in, or containing,
      a matched-name word maps to 0.9 / 0.75 / 0.6 / 0.4
    """
    if not matched_name:
        return 0.0

    query = (original_query or "").lower().strip()
    match = matched_name.lower().strip()

    if query == match:
        return 1.0

    query_words = [w for w in query.split() if len(w) >= Config.MIN_QUERY_TOKEN_LENGTH]
    match_words = match.split()

    matched_words = sum(
        1 for word in query_words
        if any(word in mw or mw in word for mw in match_words)
    )
    ratio = matched_words / len(query_words) if query_words else 0.0

    for floor, confidence in Config.CONFIDENCE_BANDS:
        if ratio >= floor:
            return confidence
    return Config.CONFIDENCE_FLOOR


def _chunked(items: list[str], size: int) -> list[list[str]]:
    return [items[i:i + size] for i in range(0, len(items), size)]


def _str_or_none(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def _to_candidate(raw: Any, original_query: str) -> MatchCandidate:
    """Convert one raw Wine Labs match record into a MatchCandidate."""
    record = raw if isinstance(raw, dict) else {}

    display_name = _str_or_none(record.get("display_name") or record.get("wl_display_name"))
    candidate = MatchCandidate(
        lwin=_str_or_none(record.get("lwin")),
        lwin7=_str_or_none(record.get("lwin7")),
        display_name=display_name,
        vintage=_str_or_none(record.get("vintage")),
        varietal=_str_or_none(record.get("varietal")),
        region=_str_or_none(record.get("region")),
        original_query=original_query,
    )
    candidate.matched = candidate.has_identifier
    if candidate.matched:
        candidate.confidence = score_match_confidence(original_query, display_name)
        candidate.data_source = DataSource.WINE_LABS
    return candidate


class WineMatcher:
    """
    Batch matcher for wine list queries.

    Any chunk request failure aborts the whole batch (WineLabsError
    propagates); an empty or short chunk response is padded instead.
    """

    def __init__(
        self,
        client: WineLabsClient,
        chunk_size: int = Config.MATCH_CHUNK_SIZE,
    ):
        """
        Initialize matcher.

        Args:
            client: Wine Labs client used for match_to_lwin_batch.
            chunk_size: Maximum queries per request.
        """
        if chunk_size < 1:
            raise ValueError("chunk_size must be positive")
        self.client = client
        self.chunk_size = chunk_size

    async def match_batch(self, queries: list[str]) -> list[MatchCandidate]:
        """
        Match queries to LWIN identifiers.

        Args:
            queries: Wine name queries as read from the list

        Returns:
            One MatchCandidate per query, same order and length as input
        """
        if not queries:
            return []

        preprocessed = [normalize_query(q) for q in queries]
        logger.debug(f"Preprocessed queries: {preprocessed}")

        raw_results: list[Any] = []
        chunks = _chunked(preprocessed, self.chunk_size)
        for chunk_idx, chunk in enumerate(chunks):
            start = chunk_idx * self.chunk_size
            logger.info(
                f"Matching wines {start + 1}-{start + len(chunk)} of {len(preprocessed)}"
            )
            results = await self.client.match_to_lwin_batch(chunk)
            if len(results) != len(chunk):
                logger.warning(
                    f"Chunk {chunk_idx}: expected {len(chunk)} results, got {len(results)}; "
                    f"padding with empty matches"
                )
            # Pad (or trim) so positions stay aligned with the chunk
            aligned = list(results[:len(chunk)]) + [None] * (len(chunk) - len(results))
            raw_results.extend(aligned)

        candidates = [
            _to_candidate(raw, query)
            for raw, query in zip(raw_results, queries)
        ]

        matched_count = sum(1 for c in candidates if c.matched)
        logger.info(
            f"Matched {matched_count}/{len(queries)} wines "
            f"({round(matched_count / len(queries) * 100)}%)"
        )
        unmatched = [q for q, c in zip(queries, candidates) if not c.matched]
        if unmatched:
            logger.warning(f"Unmatched wines ({len(unmatched)}): {unmatched}")

        return candidates
