"""Productivity index and global ranking for the Recruiter Productivity Ranking."""

import logging
import math
from dataclasses import replace
from typing import List, Optional, Sequence, Tuple
from src.models import RecruiterAggregate, RankedRecruiter
from src.config import SCORE_SCALE, INSTANT_CLOSE_MULTIPLIER, SCORE_DECIMALS

logger = logging.getLogger(__name__)


def round_half_up(value: float, decimals: int = SCORE_DECIMALS) -> float:
    """Round a non-negative value half-up to a fixed number of decimals."""
    factor = 10 ** decimals
    return math.floor(value * factor + 0.5) / factor


def compute_score(closed_count: int, average_days_to_close: Optional[float]) -> float:
    """
    Compute the productivity index for a recruiter.

    Index = (closed requisitions / average days to close) * 100

    - No closed requisitions: 0
    - Closed requisitions but no usable average (None or 0): closed * 10000,
      which puts the recruiter at the top of their volume tier
    - Otherwise the index, rounded half-up to 2 decimals

    Args:
        closed_count: Non-negative number of closed requisitions
        average_days_to_close: Mean days from request to close, or None

    Returns:
        Productivity index, higher is better
    """
    if closed_count == 0:
        return 0.0

    if average_days_to_close is None or average_days_to_close == 0:
        return float(closed_count * INSTANT_CLOSE_MULTIPLIER)

    index = (closed_count / average_days_to_close) * SCORE_SCALE
    return round_half_up(index)


def ranking_sort_key(entry, input_index: int) -> Tuple[float, int, float, int]:
    """
    Sort key for the global ranking.

    Works for anything carrying score, closed_count and average_days_to_close.
    Missing days compare as 0. Input order is the final tie-break.
    """
    days = entry.average_days_to_close if entry.average_days_to_close is not None else 0.0
    return (-entry.score, -entry.closed_count, days, input_index)


def build_ranking(entries: Sequence[RecruiterAggregate]) -> List[RankedRecruiter]:
    """Score every recruiter, order them and assign positions 1..N."""
    scored = [
        RankedRecruiter.from_aggregate(
            entry,
            score=compute_score(entry.closed_count, entry.average_days_to_close),
            position=0
        )
        for entry in entries
    ]

    order = sorted(range(len(scored)), key=lambda i: ranking_sort_key(scored[i], i))

    ranking = [
        replace(scored[i], position=pos)
        for pos, i in enumerate(order, start=1)
    ]

    logger.debug("Built ranking for %d recruiters", len(ranking))
    return ranking
