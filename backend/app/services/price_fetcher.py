"""
Price statistics and critic scores for resolved wines.

- Price stats are essential: failures propagate (WineLabsError).
- Critic scores are best-effort: any failure or malformed body yields [].
- Critic scores fall back from Wine Labs to web search, in order, moving on
  only when the previous source returned nothing.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from ..config import Config
from .web_search import WebSearchService
from .wine_records import CriticScore, CriticSummary, PriceStats, WineInfo
from .winelabs_client import WineLabsClient, WineLabsError, extract_records

logger = logging.getLogger(__name__)


# Upstream field names, canonical first
_SCORE_FIELDS = ("score", "points", "rating", "critic_score")
_CRITIC_FIELDS = ("critic", "critic_name", "reviewer", "publication", "source")
_VINTAGE_FIELDS = ("vintage", "year")
_WINDOW_FIELDS = ("drinking_window", "drink_window", "drinkingWindow")


def _first(record: dict, fields: tuple[str, ...]) -> Any:
    for name in fields:
        value = record.get(name)
        if value is not None and value != "":
            return value
    return None


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def normalize_critic_record(record: Any) -> Optional[CriticScore]:
    """
    Map one upstream critic record to a CriticScore.

    Returns None for non-dict records and for missing, non-numeric or
    non-positive scores.
    """
    if not isinstance(record, dict):
        return None

    score = _number(_first(record, _SCORE_FIELDS))
    if score is None or score <= 0:
        return None

    critic = _first(record, _CRITIC_FIELDS)
    vintage = _first(record, _VINTAGE_FIELDS)
    window = _first(record, _WINDOW_FIELDS)

    return CriticScore(
        critic=str(critic) if critic is not None else "Unknown critic",
        score=score,
        vintage=str(vintage) if vintage is not None else None,
        drinking_window=str(window) if window is not None else None,
    )


def parse_price_stats(data: Any, region: str = Config.DEFAULT_PRICE_REGION) -> PriceStats:
    """Build PriceStats from a price_stats payload; unknown fields are ignored."""
    record = data if isinstance(data, dict) else {}
    count = _number(record.get("count"))
    vintage = record.get("vintage")
    return PriceStats(
        region=str(record.get("region") or region),
        count=int(count) if count is not None else 0,
        vintage=str(vintage) if vintage else None,
        median=_number(record.get("median")),
        min=_number(record.get("min")),
        p25=_number(record.get("p25")),
        p75=_number(record.get("p75")),
        max=_number(record.get("max")),
    )


def parse_wine_info(data: Any) -> Optional[WineInfo]:
    """Build WineInfo from a wine_info payload (None if it is not an object)."""
    if isinstance(data, list):
        data = data[0] if data else None
    if not isinstance(data, dict):
        return None

    regions = [data.get(k) for k in ("region_1", "region_2", "region_3")]
    region = ", ".join(str(r) for r in regions if r) or None
    return WineInfo(
        display_name=data.get("display_name") or None,
        lwin=data.get("lwin") or None,
        lwin7=data.get("lwin7") or None,
        varietal=data.get("varietal") or None,
        colour=data.get("colour") or data.get("color") or None,
        region=region,
        country=data.get("country") or None,
    )


def summarize_critic_scores(scores: list[CriticScore]) -> Optional[CriticSummary]:
    """
    Aggregate critic scores.

    The score is the mean rounded to 2 decimals; the representative critic
    has the single highest score, the first one winning ties.
    """
    if not scores:
        return None

    mean = sum(s.score for s in scores) / len(scores)
    top = scores[0]
    for s in scores[1:]:
        if s.score > top.score:
            top = s

    return CriticSummary(score=round(mean, 2), count=len(scores), critic=top.critic)


@dataclass
class CriticScoreStrategy:
    """One critic score source in the fallback chain."""
    name: str
    fetch: Callable[[], Awaitable[list[CriticScore]]]


class PriceAndScoreFetcher:
    """Fetches market prices, critic scores and metadata for matched wines."""

    def __init__(
        self,
        client: WineLabsClient,
        web_search: Optional[WebSearchService] = None,
        region: str = Config.DEFAULT_PRICE_REGION,
    ):
        """
        Initialize fetcher.

        Args:
            client: Wine Labs client.
            web_search: Critic score fallback. None disables the fallback.
            region: Price statistics region.
        """
        self.client = client
        self.web_search = web_search
        self.region = region

    async def fetch_price_stats(
        self,
        lwin: Optional[str] = None,
        query: Optional[str] = None,
        region: Optional[str] = None,
    ) -> PriceStats:
        """
        Fetch market price statistics.

        Args:
            lwin: Wine identifier (preferred over query)
            query: Free-text wine name
            region: Price region (default: the fetcher's region)

        Raises:
            WineLabsError: The request failed
            ValueError: Neither lwin nor query was given
        """
        region = region or self.region
        data = await self.client.price_stats(lwin=lwin, query=query, region=region)
        return parse_price_stats(data, region)

    async def fetch_critic_scores(
        self,
        lwin: Optional[str] = None,
        query: Optional[str] = None,
        vintage: Optional[str] = None,
    ) -> list[CriticScore]:
        """Fetch critic scores from Wine Labs. Returns [] on any failure."""
        try:
            data = await self.client.critic_scores(lwin=lwin, query=query, vintage=vintage)
        except (WineLabsError, ValueError) as e:
            logger.warning(f"Critic scores unavailable for {lwin or query!r}: {e}")
            return []

        scores = []
        for record in extract_records(data):
            score = normalize_critic_record(record)
            if score is not None:
                scores.append(score)
        return scores

    async def fetch_wine_info(
        self,
        lwin: Optional[str] = None,
        query: Optional[str] = None,
    ) -> Optional[WineInfo]:
        """Fetch wine metadata. Returns None on any failure."""
        try:
            data = await self.client.wine_info(lwin=lwin, query=query)
        except (WineLabsError, ValueError) as e:
            logger.warning(f"Wine info unavailable for {lwin or query!r}: {e}")
            return None
        return parse_wine_info(data)

    def _critic_strategies(
        self,
        lwin: Optional[str],
        display_name: Optional[str],
        vintage: Optional[str],
    ) -> list[CriticScoreStrategy]:
        strategies = []
        if lwin:
            strategies.append(CriticScoreStrategy(
                name="wine-labs",
                fetch=lambda: self.fetch_critic_scores(lwin=lwin, vintage=vintage),
            ))
        if self.web_search is not None and display_name:
            strategies.append(CriticScoreStrategy(
                name="web-search",
                fetch=lambda: self._search_critic_scores(display_name, vintage),
            ))
        return strategies

    async def _search_critic_scores(self, display_name: str, vintage: Optional[str]) -> list[CriticScore]:
        try:
            return await self.web_search.search_critic_scores(display_name, vintage)
        except Exception as e:
            logger.warning(f"Web critic search failed for {display_name!r}: {e}")
            return []

    async def fetch_critic_scores_with_fallback(
        self,
        lwin: Optional[str],
        display_name: Optional[str],
        vintage: Optional[str] = None,
    ) -> list[CriticScore]:
        """
        Critic scores from the first source that has any.

        Wine Labs is skipped when there is no LWIN (web-search matches);
        web search is keyed on display name + vintage.
        """
        for strategy in self._critic_strategies(lwin, display_name, vintage):
            scores = await strategy.fetch()
            if scores:
                logger.debug(f"{len(scores)} critic scores for {display_name!r} from {strategy.name}")
                return scores
        return []
