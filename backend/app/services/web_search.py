"""
Web search fallback for wine information.

Uses Gemini with Google Search grounding to find wines Wine Labs could not
match, and critic scores Wine Labs does not have. Swappable via the
WebSearchService protocol.

Web search reports confidence on a 0-100 scale. Callers convert it.
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Optional, Protocol

from google import genai
from google.genai import types

from ..config import Config
from ..models.enums import DataSource
from .wine_records import CriticScore

logger = logging.getLogger(__name__)


@dataclass
class WebSearchWineResult:
    """Best-guess wine record from a web search."""
    wine_name: str
    confidence: float  # 0-100
    vintage: Optional[str] = None
    varietal: Optional[str] = None
    region: Optional[str] = None
    average_price: Optional[float] = None
    price_source: Optional[str] = None
    data_source: DataSource = DataSource.WEB_SEARCH
    search_error: Optional[str] = None


class WebSearchService(Protocol):
    """Protocol for web search backends (allows swapping providers)."""
    async def search_wine(
        self,
        wine_name: str,
        vintage: Optional[str] = None
    ) -> WebSearchWineResult: ...

    async def search_critic_scores(
        self,
        wine_name: str,
        vintage: Optional[str] = None
    ) -> list[CriticScore]: ...


WINE_SEARCH_PROMPT = """Find "{query}" wine info. Return JSON only:
{{
  "wineName": "official name",
  "vintage": "year or null",
  "varietal": "grape type or null",
  "region": "appellation or null",
  "averagePrice": number or null,
  "priceSource": "source name or null",
  "confidence": 0-100
}}
If not found, set confidence to 0."""

CRITIC_SEARCH_PROMPT = """Find critic scores and ratings for "{query}" wine. Search Wine Spectator, Robert Parker, Wine Enthusiast, Decanter, James Suckling, and other wine critics. Return JSON array only:
[
  {{
    "critic": "critic name (e.g., 'Robert Parker', 'Wine Spectator')",
    "score": number (0-100 scale),
    "source": "publication name",
    "vintage": "year or null"
  }}
]
If no scores found, return empty array []. Only include scores from reputable wine critics/publications."""

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")
_JSON_ARRAY = re.compile(r"\[[\s\S]*\]")
_NON_NUMERIC = re.compile(r"[^0-9.\-]")


def _search_query(wine_name: str, vintage: Optional[str]) -> str:
    return f"{wine_name} {vintage}" if vintage else wine_name


def _to_float(value: Any) -> Optional[float]:
    """Parse a number that may arrive as "$45.00" or "45"."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        cleaned = _NON_NUMERIC.sub("", value)
        try:
            return float(cleaned)
        except ValueError:
            return None
    return None


def _clamp_score(value: float) -> float:
    return min(100.0, max(0.0, value))


def _load_json(text: str, pattern: re.Pattern) -> Any:
    """Decode JSON from model output, tolerating prose or markdown around it."""
    found = pattern.search(text)
    return json.loads(found.group(0) if found else text)


def _response_details(response: Any) -> tuple[str, Optional[str], bool]:
    """
    Pull (text, finish_reason, searched) out of a generate_content response.

    ``searched`` is True when grounding metadata shows web queries ran.
    """
    text = ""
    try:
        text = response.text or ""
    except (AttributeError, ValueError):
        text = ""

    finish_reason = None
    searched = False
    candidates = getattr(response, "candidates", None) or []
    if candidates:
        candidate = candidates[0]
        reason = getattr(candidate, "finish_reason", None)
        if reason is not None:
            finish_reason = str(getattr(reason, "name", reason))
        metadata = getattr(candidate, "grounding_metadata", None)
        queries = getattr(metadata, "web_search_queries", None) if metadata else None
        searched = bool(queries)

    return text, finish_reason, searched


def parse_wine_search_text(
    text: str,
    wine_name: str,
    vintage: Optional[str] = None
) -> WebSearchWineResult:
    """Parse the model's JSON answer into a WebSearchWineResult."""
    try:
        data = _load_json(text, _JSON_OBJECT)
    except (json.JSONDecodeError, TypeError) as e:
        logger.warning(f"[WebSearch] Failed to parse JSON response: {e}")
        return WebSearchWineResult(
            wine_name=wine_name,
            vintage=vintage,
            confidence=0,
            search_error="Failed to parse search results",
        )

    if not isinstance(data, dict):
        return WebSearchWineResult(
            wine_name=wine_name,
            vintage=vintage,
            confidence=0,
            search_error="Unexpected search result shape",
        )

    confidence = _to_float(data.get("confidence")) or 0.0
    average_price = _to_float(data.get("averagePrice"))

    return WebSearchWineResult(
        wine_name=data.get("wineName") or wine_name,
        vintage=str(data["vintage"]) if data.get("vintage") else vintage,
        varietal=data.get("varietal") or None,
        region=data.get("region") or None,
        average_price=average_price if average_price else None,
        price_source=data.get("priceSource") or "web search",
        confidence=_clamp_score(confidence),
    )


def parse_critic_search_text(text: str, vintage: Optional[str] = None) -> list[CriticScore]:
    """Parse the model's JSON array of critic scores, dropping invalid entries."""
    try:
        data = _load_json(text, _JSON_ARRAY)
    except (json.JSONDecodeError, TypeError) as e:
        logger.warning(f"[WebSearch] Failed to parse critic scores JSON: {e}")
        return []

    if not isinstance(data, list):
        logger.warning("[WebSearch] Critic scores response is not an array")
        return []

    scores = []
    for item in data:
        if not isinstance(item, dict) or not item.get("critic"):
            continue
        score = item.get("score")
        if isinstance(score, bool) or not isinstance(score, (int, float)) or score <= 0:
            continue
        scores.append(CriticScore(
            critic=str(item["critic"]),
            score=_clamp_score(float(score)),
            source=item.get("source") or None,
            vintage=str(item["vintage"]) if item.get("vintage") else vintage,
        ))
    return scores


class GeminiWebSearch:
    """
    Web search via Gemini with Google Search grounding.

    Never raises: errors come back as a zero-confidence result (wine search)
    or an empty list (critic search).
    """

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        """
        Initialize web search.

        Args:
            api_key: Google API key. Falls back to GOOGLE_API_KEY env var.
            model: Gemini model name. Falls back to WEB_SEARCH_MODEL env var.
        """
        self.api_key = api_key or Config.gemini_api_key()
        self.model = model or Config.web_search_model()
        self._client = None

    def _get_client(self) -> genai.Client:
        """Lazy load Gemini client."""
        if self._client is None:
            if not self.api_key:
                raise ValueError(
                    "GOOGLE_API_KEY not set. Set env var or pass api_key."
                )
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    async def _generate(self, prompt: str, max_output_tokens: int) -> Any:
        client = self._get_client()
        return await client.aio.models.generate_content(
            model=self.model,
            contents=prompt,
            config=types.GenerateContentConfig(
                tools=[types.Tool(google_search=types.GoogleSearch())],
                temperature=Config.WEB_SEARCH_TEMPERATURE,
                top_k=1,
                top_p=0.8,
                max_output_tokens=max_output_tokens,
            ),
        )

    async def search_wine(
        self,
        wine_name: str,
        vintage: Optional[str] = None
    ) -> WebSearchWineResult:
        """
        Search the web for a wine.

        Args:
            wine_name: Wine name to search for
            vintage: Optional vintage year

        Returns:
            WebSearchWineResult with a 0-100 confidence
        """
        logger.info(f"[WebSearch] Searching for: {wine_name} {vintage or ''}")

        if not self.api_key:
            logger.error("[WebSearch] No Gemini API key configured")
            return WebSearchWineResult(
                wine_name=wine_name,
                vintage=vintage,
                confidence=0,
                search_error="No API key configured",
            )

        prompt = WINE_SEARCH_PROMPT.format(query=_search_query(wine_name, vintage))

        try:
            response = await self._generate(prompt, Config.WEB_SEARCH_MAX_OUTPUT_TOKENS)
        except Exception as e:
            logger.warning(f"[WebSearch] Gemini API error: {e}")
            return WebSearchWineResult(
                wine_name=wine_name,
                vintage=vintage,
                confidence=0,
                search_error=f"API error: {type(e).__name__}",
            )

        return self._wine_result_from_response(response, wine_name, vintage)

    def _wine_result_from_response(
        self,
        response: Any,
        wine_name: str,
        vintage: Optional[str]
    ) -> WebSearchWineResult:
        text, finish_reason, searched = _response_details(response)

        # A truncated answer still tells us the search found something
        if finish_reason == "MAX_TOKENS" and searched:
            logger.warning("[WebSearch] Response truncated due to MAX_TOKENS limit")
            return WebSearchWineResult(
                wine_name=wine_name,
                vintage=vintage,
                confidence=Config.WEB_SEARCH_TRUNCATED_CONFIDENCE,
                search_error="Response truncated - partial match only",
            )

        if not text:
            if searched:
                logger.info("[WebSearch] Search performed but no text returned")
                return WebSearchWineResult(
                    wine_name=wine_name,
                    vintage=vintage,
                    confidence=Config.WEB_SEARCH_INCOMPLETE_CONFIDENCE,
                    search_error="Search performed but response incomplete",
                )
            logger.warning("[WebSearch] No text in response")
            return WebSearchWineResult(
                wine_name=wine_name,
                vintage=vintage,
                confidence=0,
                search_error="Empty response from API",
            )

        result = parse_wine_search_text(text, wine_name, vintage)
        logger.debug(f"[WebSearch] Extracted data: {result}")
        return result

    async def search_critic_scores(
        self,
        wine_name: str,
        vintage: Optional[str] = None
    ) -> list[CriticScore]:
        """
        Search the web for critic scores.

        Args:
            wine_name: Wine name to search for
            vintage: Optional vintage year

        Returns:
            Critic scores (0-100), empty when nothing usable was found
        """
        logger.info(f"[WebSearch] Searching for critic scores: {wine_name} {vintage or ''}")

        if not self.api_key:
            logger.error("[WebSearch] No Gemini API key configured")
            return []

        prompt = CRITIC_SEARCH_PROMPT.format(query=_search_query(wine_name, vintage))

        try:
            response = await self._generate(prompt, Config.CRITIC_SEARCH_MAX_OUTPUT_TOKENS)
        except Exception as e:
            logger.warning(f"[WebSearch] Critic scores API error: {e}")
            return []

        text, _, _ = _response_details(response)
        if not text:
            logger.info("[WebSearch] No critic scores found in response")
            return []

        scores = parse_critic_search_text(text, vintage)
        logger.info(f"[WebSearch] Found {len(scores)} critic scores from web search")
        return scores


class MockWebSearch:
    """Mock web search for testing and USE_MOCKS mode, no API calls."""

    WINE_KEYWORDS = {
        'wine', 'cabernet', 'merlot', 'pinot', 'chardonnay', 'sauvignon',
        'blanc', 'syrah', 'zinfandel', 'riesling', 'noir', 'rosé',
        'reserve', 'estate', 'vineyard', 'chateau', 'château', 'domaine',
        'valley', 'napa', 'burgundy', 'bordeaux', 'rioja', 'barolo',
        'tempranillo', 'malbec', 'shiraz', 'grenache', 'champagne',
    }

    async def search_wine(
        self,
        wine_name: str,
        vintage: Optional[str] = None
    ) -> WebSearchWineResult:
        """Return a confident result when the name looks like a wine."""
        words = set(wine_name.lower().split())
        if words & self.WINE_KEYWORDS:
            return WebSearchWineResult(
                wine_name=wine_name.strip().title(),
                vintage=vintage,
                confidence=60,
                price_source="Mock: web search",
            )
        return WebSearchWineResult(
            wine_name=wine_name,
            vintage=vintage,
            confidence=0,
            search_error="Mock: No wine keywords found",
        )

    async def search_critic_scores(
        self,
        wine_name: str,
        vintage: Optional[str] = None
    ) -> list[CriticScore]:
        """Return one mid-tier score for wine-like names."""
        words = set(wine_name.lower().split())
        if words & self.WINE_KEYWORDS:
            return [CriticScore(critic="Mock Critic", score=90, source="Mock", vintage=vintage)]
        return []


def get_web_search(use_mock: bool = False) -> WebSearchService:
    """
    Factory function for web search backends.

    Args:
        use_mock: If True, return mock search for testing.

    Returns:
        A backend implementing WebSearchService.
    """
    if use_mock:
        return MockWebSearch()
    logger.info("Using Gemini for web search fallback")
    return GeminiWebSearch()
