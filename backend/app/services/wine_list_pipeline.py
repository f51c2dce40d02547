"""
Wine list reconciliation pipeline.

Architecture:
1. Build queries from parsed list items ("{name} {vintage}")
2. Batch match against Wine Labs (chunked, sequential)
3. Web search fallback for unmatched wines (concurrent)
4. Price stats + critic scores per wine (concurrent across wines)
5. Markup, critic aggregation, rankings

Wine Labs matching and price stats are essential: their failures abort the
run with WineListProcessingError. Everything else degrades to missing fields.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Optional

from ..feature_flags import FeatureFlags, get_feature_flags
from ..models.enums import DataSource
from .fallback_enricher import FallbackEnricher
from .formatting import format_markup
from .metrics import calculate_markup
from .price_fetcher import PriceAndScoreFetcher, summarize_critic_scores
from .ranking import rank_wines
from .web_search import WebSearchService
from .wine_matcher import WineMatcher
from .wine_records import MatchCandidate, RankingResults, Wine, WineListItem
from .winelabs_client import WineLabsClient, WineLabsError

logger = logging.getLogger(__name__)


class WineListProcessingError(Exception):
    """Essential wine data could not be fetched; the list cannot be processed."""


@dataclass
class WineListAnalysis:
    """Result of one pipeline run."""
    wines: list[Wine]
    rankings: RankingResults
    matched_count: int = 0
    web_search_count: int = 0
    timings: dict = field(default_factory=dict)


class WineListPipeline:
    """
    Reconciles parsed wine list items into enriched, ranked wines.

    Components are built from the client/web search given here unless
    passed explicitly; no state is shared between runs.
    """

    def __init__(
        self,
        client: WineLabsClient,
        web_search: Optional[WebSearchService] = None,
        flags: Optional[FeatureFlags] = None,
        matcher: Optional[WineMatcher] = None,
        enricher: Optional[FallbackEnricher] = None,
        fetcher: Optional[PriceAndScoreFetcher] = None,
    ):
        """
        Initialize pipeline.

        Args:
            client: Wine Labs client
            web_search: Web search backend; None disables both web fallbacks
            flags: Feature flags (default: get_feature_flags())
            matcher: Override the identity matcher
            enricher: Override the web search enricher
            fetcher: Override the price/critic fetcher
        """
        self.flags = flags or get_feature_flags()
        self.matcher = matcher or WineMatcher(client)

        if enricher is not None:
            self.enricher: Optional[FallbackEnricher] = enricher
        elif web_search is not None and self.flags.feature_web_search_fallback:
            self.enricher = FallbackEnricher(web_search)
        else:
            self.enricher = None

        critic_search = web_search if self.flags.feature_critic_score_fallback else None
        self.fetcher = fetcher or PriceAndScoreFetcher(client, web_search=critic_search)

    async def match(self, items: list[WineListItem]) -> list[MatchCandidate]:
        """Identity match plus web search fallback. Raises WineLabsError."""
        queries = [item.query for item in items]
        matches = await self.matcher.match_batch(queries)
        if self.enricher is not None:
            matches = await self.enricher.enrich(queries, matches)
        return matches

    async def process(self, items: list[WineListItem]) -> list[Wine]:
        """
        Turn parsed list items into enriched wines (input order kept).

        Raises:
            WineListProcessingError: Matching or price stats failed
        """
        return (await self._process(items, timings={}))[0]

    async def analyze(self, items: list[WineListItem]) -> WineListAnalysis:
        """Process items and rank the result."""
        timings: dict = {}
        total_start = time.perf_counter()

        wines, matches = await self._process(items, timings)

        t0 = time.perf_counter()
        rankings = rank_wines(wines)
        timings["ranking_ms"] = round((time.perf_counter() - t0) * 1000)
        timings["total_ms"] = round((time.perf_counter() - total_start) * 1000)

        analysis = WineListAnalysis(
            wines=wines,
            rankings=rankings,
            matched_count=sum(1 for m in matches if m.matched),
            web_search_count=sum(1 for m in matches if m.data_source == DataSource.WEB_SEARCH),
            timings=timings,
        )
        logger.info(
            f"WineListPipeline: {analysis.matched_count}/{len(items)} matched "
            f"({analysis.web_search_count} via web search) in {timings['total_ms']}ms"
        )
        return analysis

    async def _process(
        self,
        items: list[WineListItem],
        timings: dict
    ) -> tuple[list[Wine], list[MatchCandidate]]:
        if not items:
            return [], []

        try:
            t0 = time.perf_counter()
            matches = await self.match(items)
            timings["matching_ms"] = round((time.perf_counter() - t0) * 1000)

            t0 = time.perf_counter()
            wines = await asyncio.gather(
                *(self._build_wine(item, match) for item, match in zip(items, matches))
            )
            timings["enrichment_ms"] = round((time.perf_counter() - t0) * 1000)
        except WineLabsError as e:
            logger.error(
                f"Failed to process wine list ({e.endpoint}, status={e.status_code}): {e}",
                exc_info=True,
            )
            raise WineListProcessingError(str(e)) from e

        return list(wines), matches

    async def _build_wine(self, item: WineListItem, match: MatchCandidate) -> Wine:
        """Combine a list item with its match, prices and critic scores."""
        display_name = match.display_name or item.wine_name or "Unknown Wine"
        vintage = match.vintage or item.vintage
        identifier = match.lwin or match.lwin7

        wine = Wine(
            display_name=display_name,
            restaurant_price=item.price,
            vintage=vintage,
            lwin=match.lwin,
            lwin7=match.lwin7,
            varietal=match.varietal,
            region=match.region,
            data_source=match.data_source,
            web_search_price=match.web_search_price,
            web_search_source=match.web_search_source,
        )
        if match.data_source == DataSource.WEB_SEARCH:
            wine.search_confidence = match.confidence

        if not match.matched:
            return wine

        critic_task = self.fetcher.fetch_critic_scores_with_fallback(identifier, display_name, vintage)
        if identifier:
            price_stats, critic_scores = await asyncio.gather(
                self.fetcher.fetch_price_stats(lwin=identifier),
                critic_task,
            )
            if price_stats.median:
                wine.real_price = price_stats.median
                wine.markup = calculate_markup(item.price, price_stats.median)
        else:
            critic_scores = await critic_task

        summary = summarize_critic_scores(critic_scores)
        if summary is not None:
            wine.critic_score = summary.score
            wine.critic_count = summary.count
            wine.critic = summary.critic

        if identifier and self.flags.feature_wine_info and not (wine.varietal and wine.region):
            info = await self.fetcher.fetch_wine_info(lwin=identifier)
            if info is not None:
                wine.varietal = wine.varietal or info.varietal
                wine.region = wine.region or info.region or info.country
                wine.color = info.colour

        logger.debug(
            f"Processed wine: {display_name} "
            f"(lwin={bool(identifier)}, price={bool(wine.real_price)}, "
            f"score={bool(wine.critic_score)}, "
            f"markup={format_markup(wine.markup) if wine.markup is not None else 'N/A'})"
        )
        return wine
