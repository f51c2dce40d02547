"""
Derived wine metrics: markup and value score.
"""

from typing import Optional

from ..config import Config
from ..models.enums import MarkupTier
from .wine_records import Wine


def calculate_markup(restaurant_price: float, real_price: float) -> float:
    """
    Percentage by which the restaurant price exceeds the market price.

    Returns 0 when the market price is zero or negative.
    """
    if real_price <= 0:
        return 0.0
    return ((restaurant_price - real_price) / real_price) * 100


def calculate_value_score(wine: Wine) -> Optional[float]:
    """
    Quality per dollar, discounted by markup.

        (critic_score / restaurant_price) * (1 / (1 + markup / 100))

    Returns None when any input is missing or the wine is unpriced. A markup
    of -100% or lower also yields None.
    """
    if not wine.critic_score or wine.critic_score <= 0:
        return None
    if not wine.real_price or wine.real_price <= 0:
        return None
    if wine.markup is None or wine.restaurant_price <= 0:
        return None

    markup_base = 1 + wine.markup / 100
    if markup_base <= 0:
        return None

    price_efficiency = wine.critic_score / wine.restaurant_price
    markup_factor = 1 / markup_base
    return price_efficiency * markup_factor


def markup_tier(markup: float) -> MarkupTier:
    """Bucket a markup percentage: <100 reasonable, <200 moderate, else high."""
    if markup < Config.MARKUP_REASONABLE_MAX:
        return MarkupTier.REASONABLE
    if markup < Config.MARKUP_MODERATE_MAX:
        return MarkupTier.MODERATE
    return MarkupTier.HIGH
