from .winelabs_client import WineLabsClient, WineLabsError
from .wine_matcher import WineMatcher
from .web_search import GeminiWebSearch, MockWebSearch, get_web_search
from .fallback_enricher import FallbackEnricher
from .price_fetcher import PriceAndScoreFetcher
from .ranking import rank_wines
from .wine_list_pipeline import WineListPipeline, WineListProcessingError

__all__ = [
    "WineLabsClient",
    "WineLabsError",
    "WineMatcher",
    "GeminiWebSearch",
    "MockWebSearch",
    "get_web_search",
    "FallbackEnricher",
    "PriceAndScoreFetcher",
    "rank_wines",
    "WineListPipeline",
    "WineListProcessingError",
]
