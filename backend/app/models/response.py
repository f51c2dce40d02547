"""
Pydantic models for the Wine List Scanner API response.

API Contract:
{
  "wines": [
    {
      "display_name": "string",
      "restaurant_price": 120.0,
      "real_price": 60.0,
      "markup": 100.0,
      "critic_score": 94.5,
      ...
    }
  ],
  "rankings": {
    "highest_rated": [...],
    "best_value": [...],
    "most_inexpensive": [...]
  },
  "stats": {"total": 3, "matched": 2, "web_search": 1, "timings_ms": {...}}
}
"""

from typing import Optional

from pydantic import BaseModel, Field

from ..models.enums import DataSource, MarkupTier
from ..services.metrics import markup_tier
from ..services.wine_records import RankingResults, Wine


class WineResult(BaseModel):
    """An enriched wine from the list."""
    display_name: str = Field(..., description="Canonical (or printed) wine name")
    restaurant_price: float = Field(..., description="Price on the wine list")
    vintage: Optional[str] = None
    real_price: Optional[float] = Field(None, description="Median market price")
    markup: Optional[float] = Field(None, ge=-100, description="Percent over market price")
    markup_tier: Optional[MarkupTier] = None
    critic_score: Optional[float] = Field(None, ge=0, le=100, description="Mean critic score (0-100)")
    critic_count: Optional[int] = None
    critic: Optional[str] = Field(None, description="Critic with the highest score")
    varietal: Optional[str] = None
    region: Optional[str] = None
    color: Optional[str] = None
    lwin: Optional[str] = None
    lwin7: Optional[str] = None
    data_source: Optional[DataSource] = None
    search_confidence: Optional[float] = Field(None, ge=0, le=1, description="Web search confidence")
    web_search_price: Optional[float] = None
    web_search_source: Optional[str] = None

    @classmethod
    def from_wine(cls, wine: Wine) -> "WineResult":
        return cls(
            display_name=wine.display_name,
            restaurant_price=wine.restaurant_price,
            vintage=wine.vintage,
            real_price=wine.real_price,
            markup=wine.markup,
            markup_tier=markup_tier(wine.markup) if wine.markup is not None else None,
            critic_score=wine.critic_score,
            critic_count=wine.critic_count,
            critic=wine.critic,
            varietal=wine.varietal,
            region=wine.region,
            color=wine.color,
            lwin=wine.lwin,
            lwin7=wine.lwin7,
            data_source=wine.data_source,
            search_confidence=wine.search_confidence,
            web_search_price=wine.web_search_price,
            web_search_source=wine.web_search_source,
        )

    def to_wine(self) -> Wine:
        return Wine(
            display_name=self.display_name,
            restaurant_price=self.restaurant_price,
            vintage=self.vintage,
            real_price=self.real_price,
            markup=self.markup,
            critic_score=self.critic_score,
            critic_count=self.critic_count,
            critic=self.critic,
            varietal=self.varietal,
            region=self.region,
            color=self.color,
            lwin=self.lwin,
            lwin7=self.lwin7,
            data_source=self.data_source,
            search_confidence=self.search_confidence,
            web_search_price=self.web_search_price,
            web_search_source=self.web_search_source,
        )


class RankingResponse(BaseModel):
    """The three ranked views over a wine list."""
    highest_rated: list[WineResult] = Field(default_factory=list)
    best_value: list[WineResult] = Field(default_factory=list)
    most_inexpensive: list[WineResult] = Field(default_factory=list)

    @classmethod
    def from_results(cls, results: RankingResults) -> "RankingResponse":
        return cls(
            highest_rated=[WineResult.from_wine(w) for w in results.highest_rated],
            best_value=[WineResult.from_wine(w) for w in results.best_value],
            most_inexpensive=[WineResult.from_wine(w) for w in results.most_inexpensive],
        )


class AnalysisStats(BaseModel):
    """Match counts and stage timings for one analysis."""
    total: int = 0
    matched: int = 0
    web_search: int = 0
    timings_ms: dict[str, int] = Field(default_factory=dict)


class AnalyzeResponse(BaseModel):
    """Response from /lists/analyze."""
    wines: list[WineResult] = Field(default_factory=list)
    rankings: RankingResponse = Field(default_factory=RankingResponse)
    stats: AnalysisStats = Field(default_factory=AnalysisStats)
    summary: Optional[str] = Field(None, description="Markdown summary for chat display")
