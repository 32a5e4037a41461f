"""
Decimal odds to de-vigged implied probabilities.

Each price is inverted to an implied probability and the set is then scaled
so it sums to one, which removes the bookmaker margin (overround) while
keeping the relative ordering of the outcomes.

Degenerate prices (zero, negative, missing, non-finite) are NOT rejected here:
they propagate as ``nan``/``inf`` exactly as IEEE arithmetic would produce
them. Callers must check with ``finite_or_none`` / ``format_probability``
before persisting anything.

Also holds the participant-name folding used by the ``--include`` filter.
"""
from __future__ import annotations

import math
from typing import Iterable, List, Optional

from unidecode import unidecode


def _as_float(value) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def _divide(numerator: float, denominator: float) -> float:
    """IEEE-style division: x/0 gives +-inf (or nan for 0/0) instead of raising."""
    try:
        return numerator / denominator
    except ZeroDivisionError:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)


def implied_probabilities(decimal_odds: Iterable) -> List[float]:
    """Raw implied probabilities 1/o, margin included."""
    return [_divide(1.0, _as_float(o)) for o in decimal_odds]


def normalize_decimal_odds(decimal_odds: Iterable) -> List[float]:
    """
    Convert decimal odds into normalized implied probabilities.

    Args:
        decimal_odds: Prices in decimal format, e.g. [1.80, 2.20]

    Returns:
        Probabilities in the same order, e.g. [0.55, 0.45]
    """
    implied = implied_probabilities(decimal_odds)
    total = sum(implied)
    return [_divide(p, total) for p in implied]


def overround(decimal_odds: Iterable) -> float:
    """Bookmaker margin: sum of implied probabilities minus one."""
    return sum(implied_probabilities(decimal_odds)) - 1.0


def finite_or_none(value: float) -> Optional[float]:
    if value is None or not math.isfinite(value):
        return None
    return value


def format_probability(value: Optional[float]) -> str:
    """Four decimal places, or an empty string for a missing/non-finite value."""
    value = finite_or_none(value)
    return "" if value is None else f"{value:.4f}"


def fold_name(name: str) -> str:
    """
    ASCII-fold a participant name so plain patterns match accented names.

    "Novak Djoković" -> "Novak Djokovic"
    """
    if not name:
        return ""
    return unidecode(name)
