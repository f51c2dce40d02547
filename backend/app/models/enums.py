"""
Enums for type-safe string constants in Wine List Scanner.
"""

from enum import Enum


class DataSource(str, Enum):
    """Provenance of a matched wine record."""
    WINE_LABS = "wine-labs"
    WEB_SEARCH = "web-search"


class MarkupTier(str, Enum):
    """Markup bands shown next to a price."""
    REASONABLE = "reasonable"  # < 100%
    MODERATE = "moderate"      # 100-200%
    HIGH = "high"              # > 200%
