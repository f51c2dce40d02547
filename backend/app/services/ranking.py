"""
Wine list rankings.

Produces three views of a wine list:
- highest_rated: critic score, high to low
- best_value: value score (see metrics.calculate_value_score), high to low
- most_inexpensive: restaurant price, low to high

Only wines with a positive restaurant price are ranked. Sorting is stable,
so ties keep their input order.
"""

from .metrics import calculate_value_score
from .wine_records import RankingResults, Wine


def rank_wines(wines: list[Wine]) -> RankingResults:
    """Rank a wine list into the three named views."""
    valid = [w for w in wines if w.restaurant_price and w.restaurant_price > 0]

    highest_rated = sorted(
        (w for w in valid if w.critic_score and w.critic_score > 0),
        key=lambda w: w.critic_score,
        reverse=True,
    )

    most_inexpensive = sorted(valid, key=lambda w: w.restaurant_price)

    # Value scores are computed here only; they are not stored on the wines
    scored = []
    for wine in valid:
        value = calculate_value_score(wine)
        if value is not None:
            scored.append((value, wine))
    best_value = [w for _, w in sorted(scored, key=lambda pair: pair[0], reverse=True)]

    return RankingResults(
        highest_rated=highest_rated,
        best_value=best_value,
        most_inexpensive=most_inexpensive,
    )
