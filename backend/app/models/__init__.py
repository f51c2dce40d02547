from .enums import (
    DataSource,
    MarkupTier,
)
from .request import (
    WineListItemIn,
    AnalyzeRequest,
    RankRequest,
)
from .response import (
    WineResult,
    RankingResponse,
    AnalysisStats,
    AnalyzeResponse,
)

__all__ = [
    "DataSource",
    "MarkupTier",
    "WineListItemIn",
    "AnalyzeRequest",
    "RankRequest",
    "WineResult",
    "RankingResponse",
    "AnalysisStats",
    "AnalyzeResponse",
]
