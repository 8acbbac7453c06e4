# src/duelrank/rating/elo_engine.py

"""
Pairwise Elo rating update used for every recorded match.

Each side is rounded on its own, so the two deltas of one match may differ
by a point. Ratings are not clamped and can go negative.
"""

import math

DEFAULT_RATING = 1500
K_FACTOR = 32
SCALE_FACTOR = 400


def expected_score(rating: int, opponent_rating: int) -> float:
    """Probability-like chance that ``rating`` beats ``opponent_rating``.

    Saturates to 0.0 or 1.0 for gaps too wide to represent, so the result
    is defined for any pair of integer ratings.
    """
    gap = opponent_rating - rating
    try:
        odds_against = 10 ** (gap / SCALE_FACTOR)
    except OverflowError:
        # Gap too wide for a float; the weaker side has no chance
        return 0.0 if gap > 0 else 1.0
    return 1 / (1 + odds_against)


def round_half_away_from_zero(value: float) -> int:
    """Round to the nearest integer, ties going away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def compute_new_ratings(
    rating_a: int, rating_b: int, a_is_winner: bool
) -> tuple[int, int]:
    """
    Calculates both players' ratings after a single decided match.

    Returns:
        (new_rating_a, new_rating_b)
    """
    expected_a = expected_score(rating_a, rating_b)
    expected_b = expected_score(rating_b, rating_a)

    actual_a = 1 if a_is_winner else 0
    actual_b = 1 - actual_a

    new_rating_a = round_half_away_from_zero(
        rating_a + K_FACTOR * (actual_a - expected_a)
    )
    new_rating_b = round_half_away_from_zero(
        rating_b + K_FACTOR * (actual_b - expected_b)
    )
    return new_rating_a, new_rating_b
