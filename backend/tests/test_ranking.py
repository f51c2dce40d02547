"""
Tests for wine metrics and rankings.
"""

import pytest

from app.models.enums import MarkupTier
from app.services.metrics import calculate_markup, calculate_value_score, markup_tier
from app.services.ranking import rank_wines
from app.services.wine_records import Wine


def _wine(name, restaurant_price, critic_score=None, real_price=None, markup=None, **kwargs):
    return Wine(
        display_name=name,
        restaurant_price=restaurant_price,
        critic_score=critic_score,
        real_price=real_price,
        markup=markup,
        **kwargs,
    )


class TestCalculateMarkup:
    """Markup is the percentage over market price."""

    def test_markup(self):
        assert calculate_markup(120, 60) == 100.0

    def test_below_market(self):
        assert calculate_markup(50, 100) == -50.0

    def test_at_market(self):
        assert calculate_markup(60, 60) == 0.0

    @pytest.mark.parametrize("real_price", [0, -10])
    def test_no_market_price(self, real_price):
        assert calculate_markup(100, real_price) == 0.0


class TestMarkupTier:
    """Markup tiers: <100 reasonable, <200 moderate, else high."""

    @pytest.mark.parametrize("markup,tier", [
        (-20, MarkupTier.REASONABLE),
        (99.9, MarkupTier.REASONABLE),
        (100, MarkupTier.MODERATE),
        (199, MarkupTier.MODERATE),
        (200, MarkupTier.HIGH),
        (450, MarkupTier.HIGH),
    ])
    def test_tiers(self, markup, tier):
        assert markup_tier(markup) == tier


class TestValueScore:
    """Value score = (score / price) * 1 / (1 + markup / 100)."""

    def test_value_score(self):
        wine = _wine("A", 100, critic_score=90, real_price=50, markup=100)
        assert calculate_value_score(wine) == pytest.approx(0.45)

    def test_negative_markup_rewards(self):
        wine = _wine("A", 50, critic_score=90, real_price=100, markup=-50)
        assert calculate_value_score(wine) == pytest.approx(3.6)

    @pytest.mark.parametrize("wine", [
        _wine("No score", 100, real_price=50, markup=100),
        _wine("Zero score", 100, critic_score=0, real_price=50, markup=100),
        _wine("No market", 100, critic_score=90, markup=100),
        _wine("Zero market", 100, critic_score=90, real_price=0, markup=0),
        _wine("No markup", 100, critic_score=90, real_price=50),
        _wine("Unpriced", 0, critic_score=90, real_price=50, markup=-100),
        _wine("Full discount", 50, critic_score=90, real_price=100, markup=-100),
        _wine("Past discount", 50, critic_score=90, real_price=100, markup=-150),
    ])
    def test_missing_inputs(self, wine):
        assert calculate_value_score(wine) is None


class TestRankWines:
    """Tests for rank_wines()."""

    def test_empty(self):
        results = rank_wines([])
        assert results.highest_rated == []
        assert results.best_value == []
        assert results.most_inexpensive == []

    def test_value_ranking_example(self):
        """A: 120 vs 60 market, score 90. B: 80, score 95, market price 0."""
        a = _wine("A", 120, critic_score=90, real_price=60, markup=100)
        b = _wine("B", 80, critic_score=95, real_price=0, markup=0)

        results = rank_wines([a, b])

        assert results.highest_rated == [b, a]
        assert results.most_inexpensive == [b, a]
        assert results.best_value == [a]
        assert calculate_value_score(a) == pytest.approx(0.375)

    def test_unpriced_wines_excluded_everywhere(self):
        free = _wine("Free", 0, critic_score=99, real_price=10, markup=-100)
        priced = _wine("Priced", 40, critic_score=88, real_price=30, markup=33)

        results = rank_wines([free, priced])

        for view in (results.highest_rated, results.best_value, results.most_inexpensive):
            assert free not in view

    def test_unscored_wines_only_in_price_view(self):
        unscored = _wine("Unscored", 30, real_price=20, markup=50)
        scored = _wine("Scored", 60, critic_score=91, real_price=40, markup=50)

        results = rank_wines([unscored, scored])

        assert results.highest_rated == [scored]
        assert results.best_value == [scored]
        assert results.most_inexpensive == [unscored, scored]

    def test_ties_keep_input_order(self):
        first = _wine("First", 50, critic_score=92)
        second = _wine("Second", 50, critic_score=92)
        third = _wine("Third", 50, critic_score=92)

        results = rank_wines([first, second, third])

        assert results.highest_rated == [first, second, third]
        assert results.most_inexpensive == [first, second, third]

    def test_best_value_order(self):
        cheap_good = _wine("Cheap", 68, critic_score=94, real_price=42, markup=62)
        pricey = _wine("Pricey", 3500, critic_score=100, real_price=1200, markup=192)
        mid = _wine("Mid", 140, critic_score=92, real_price=85, markup=65)

        results = rank_wines([pricey, mid, cheap_good])

        assert results.best_value == [cheap_good, mid, pricey]

    def test_input_not_mutated(self):
        wines = [_wine("B", 80, critic_score=95), _wine("A", 20, critic_score=85)]
        snapshot = list(wines)

        rank_wines(wines)

        assert wines == snapshot
        assert not hasattr(wines[0], "value_score")

    def test_price_ties_stable_with_markup_from_prices(self):
        a = _wine("A", 100, real_price=50, markup=calculate_markup(100, 50))
        b = _wine("B", 100, real_price=0, markup=calculate_markup(100, 0))
        c = _wine("C", 50)

        results = rank_wines([a, b, c])

        assert a.markup == 100.0
        assert b.markup == 0.0
        assert [w.display_name for w in results.most_inexpensive] == ["C", "A", "B"]
