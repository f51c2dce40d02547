"""
Data classes shared by the wine list reconciliation pipeline.

WineListItem → MatchCandidate → (PriceStats, CriticScore, WineInfo) → Wine → RankingResults
"""

from dataclasses import dataclass, field
from typing import Optional

from ..models.enums import DataSource


@dataclass(frozen=True)
class WineListItem:
    """A line extracted from a photographed wine list."""
    raw_text: str
    wine_name: str
    price: float             # Currency-less restaurant price
    vintage: Optional[str] = None
    confidence: Optional[float] = None  # OCR confidence, if the parser gave one

    @property
    def query(self) -> str:
        """Identity lookup query: name plus vintage when known."""
        if self.vintage:
            return f"{self.wine_name} {self.vintage}"
        return self.wine_name


@dataclass
class MatchCandidate:
    """Result of resolving one query against Wine Labs (or web search)."""
    matched: bool = False
    confidence: float = 0.0  # 0-1 for every data source
    lwin: Optional[str] = None
    lwin7: Optional[str] = None
    display_name: Optional[str] = None
    vintage: Optional[str] = None
    varietal: Optional[str] = None
    region: Optional[str] = None
    # Web search fallback fields
    data_source: Optional[DataSource] = None
    web_search_price: Optional[float] = None
    web_search_source: Optional[str] = None
    original_query: Optional[str] = None

    @property
    def has_identifier(self) -> bool:
        return bool(self.lwin or self.lwin7)


@dataclass(frozen=True)
class PriceStats:
    """Market price distribution for one wine."""
    region: str = "world"
    count: int = 0
    vintage: Optional[str] = None
    median: Optional[float] = None
    min: Optional[float] = None
    p25: Optional[float] = None
    p75: Optional[float] = None
    max: Optional[float] = None


@dataclass(frozen=True)
class CriticScore:
    """A single critic or publication rating (0-100 scale)."""
    critic: str
    score: float
    vintage: Optional[str] = None
    drinking_window: Optional[str] = None
    source: Optional[str] = None  # Publication, set by web search


@dataclass(frozen=True)
class CriticSummary:
    """Aggregate of a wine's critic scores."""
    score: float   # Mean, rounded to 2 decimals
    count: int
    critic: str    # Critic with the single highest score


@dataclass(frozen=True)
class WineInfo:
    """Descriptive metadata from Wine Labs wine_info."""
    display_name: Optional[str] = None
    lwin: Optional[str] = None
    lwin7: Optional[str] = None
    varietal: Optional[str] = None
    colour: Optional[str] = None
    region: Optional[str] = None
    country: Optional[str] = None


@dataclass
class Wine:
    """An enriched wine, ready for ranking and presentation."""
    display_name: str
    restaurant_price: float
    vintage: Optional[str] = None
    real_price: Optional[float] = None
    markup: Optional[float] = None
    critic_score: Optional[float] = None
    critic_count: Optional[int] = None
    critic: Optional[str] = None
    varietal: Optional[str] = None
    region: Optional[str] = None
    color: Optional[str] = None
    lwin: Optional[str] = None
    lwin7: Optional[str] = None
    # Provenance
    data_source: Optional[DataSource] = None
    search_confidence: Optional[float] = None  # 0-1
    web_search_price: Optional[float] = None
    web_search_source: Optional[str] = None


@dataclass
class RankingResults:
    """The three ranked views over a wine list."""
    highest_rated: list[Wine] = field(default_factory=list)
    best_value: list[Wine] = field(default_factory=list)
    most_inexpensive: list[Wine] = field(default_factory=list)
