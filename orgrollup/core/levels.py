from __future__ import annotations
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Optional, Tuple


INSUFFICIENT = "Insufficient"
BEGINNING = "Beginning"
DEVELOPING = "Developing"
INNOVATIVE = "Innovative"
OPTIMAL = "Optimal"

# Lowest to highest
LEVELS: Tuple[str, ...] = (INSUFFICIENT, BEGINNING, DEVELOPING, INNOVATIVE, OPTIMAL)

LEVEL_SCORES: Dict[str, int] = {label: i + 1 for i, label in enumerate(LEVELS)}

DEFAULT_SCORE = 1


def level_to_score(level: Optional[str]) -> int:
    """Score for a categorical level; anything unrecognised scores as Insufficient."""
    if level is None:
        return DEFAULT_SCORE
    return LEVEL_SCORES.get(level, DEFAULT_SCORE)


def score_to_level(score: float) -> str:
    # Half-point boundaries, not round-to-nearest: 3.4 is Developing, 3.5 is Innovative.
    if score >= 4.5:
        return OPTIMAL
    if score >= 3.5:
        return INNOVATIVE
    if score >= 2.5:
        return DEVELOPING
    if score >= 1.5:
        return BEGINNING
    return INSUFFICIENT


def round2(value: float) -> float:
    """Round half-up to 2 decimals (3.335 -> 3.34)."""
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
