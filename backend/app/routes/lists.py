"""
/lists endpoints for Wine List Scanner.

Receives wine list items parsed from a photographed menu and returns the
reconciled wines plus the three rankings.
"""

import logging
from typing import AsyncIterator, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..config import Config
from ..feature_flags import FeatureFlags, get_feature_flags
from ..mocks.fixtures import get_mock_response
from ..models import AnalysisStats, AnalyzeRequest, AnalyzeResponse, RankingResponse, RankRequest, WineResult
from ..services.formatting import format_wines_as_markdown
from ..services.ranking import rank_wines
from ..services.web_search import get_web_search
from ..services.wine_list_pipeline import WineListPipeline, WineListProcessingError
from ..services.winelabs_client import WineLabsClient

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/lists")


async def get_pipeline(
    flags: FeatureFlags = Depends(get_feature_flags),
) -> AsyncIterator[WineListPipeline]:
    """Pipeline with a request-scoped Wine Labs client."""
    async with WineLabsClient() as client:
        yield WineListPipeline(
            client,
            web_search=get_web_search(use_mock=Config.use_mocks()),
            flags=flags,
        )


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze_list(
    request: AnalyzeRequest,
    mock_scenario: Optional[str] = Query(None, description="Mock scenario for testing"),
    pipeline: WineListPipeline = Depends(get_pipeline),
) -> AnalyzeResponse:
    """
    Reconcile wine list items and rank them.

    Args:
        request: Parsed wine list items
        mock_scenario: Optional fixture name (full_list, mixed_data, empty_list)

    Returns:
        AnalyzeResponse with enriched wines, rankings and match stats
    """
    if mock_scenario:
        return get_mock_response(mock_scenario)

    if not request.items:
        raise HTTPException(status_code=400, detail="No wine list items provided")

    items = [item.to_item() for item in request.items]

    try:
        analysis = await pipeline.analyze(items)
    except WineListProcessingError as e:
        logger.error(f"Wine list processing failed: {e}")
        raise HTTPException(
            status_code=502,
            detail="Failed to process wine list. Please try again."
        )

    return AnalyzeResponse(
        wines=[WineResult.from_wine(w) for w in analysis.wines],
        rankings=RankingResponse.from_results(analysis.rankings),
        stats=AnalysisStats(
            total=len(items),
            matched=analysis.matched_count,
            web_search=analysis.web_search_count,
            timings_ms=analysis.timings,
        ),
        summary=format_wines_as_markdown(analysis.wines),
    )


@router.post("/rank", response_model=RankingResponse)
async def rank_list(request: RankRequest) -> RankingResponse:
    """Rank already enriched wines (no upstream calls)."""
    wines = [w.to_wine() for w in request.wines]
    return RankingResponse.from_results(rank_wines(wines))


@router.get("/sample", response_model=AnalyzeResponse)
async def sample_list(
    scenario: str = Query("full_list", description="full_list, mixed_data or empty_list"),
) -> AnalyzeResponse:
    """Canned analysis of a sample wine list, for UI development."""
    return get_mock_response(scenario)
