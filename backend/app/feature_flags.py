"""
Feature flags for Wine List Scanner.

Uses pydantic-settings (FastAPI-recommended) for typed, validated,
environment-variable-backed feature flags.

Toggle via env vars: FEATURE_WEB_SEARCH_FALLBACK=false
All flags default to True (on). Disable via env vars when needed.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class FeatureFlags(BaseSettings):
    """Feature flags backed by environment variables."""

    # Web search for queries Wine Labs could not match
    feature_web_search_fallback: bool = True
    # Web search for critic scores when Wine Labs has none
    feature_critic_score_fallback: bool = True
    # Backfill varietal/region/color from Wine Labs wine_info
    feature_wine_info: bool = True

    model_config = {
        "env_prefix": "",
        "case_sensitive": False,
    }


@lru_cache()
def get_feature_flags() -> FeatureFlags:
    """Cached singleton. Use FastAPI Depends() for injection."""
    return FeatureFlags()
