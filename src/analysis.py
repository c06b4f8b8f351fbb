"""Leaderboard analysis for the Recruiter Productivity Ranking."""

from typing import Dict, List, Optional, Sequence
import numpy as np
import pandas as pd
from scipy import stats as stats_module
from src.models import RankedRecruiter
from src.config import DEFAULT_DISPLAY_NAME, PODIUM_BADGES

SORTABLE_COLUMNS = ("score", "closed_count", "average_days_to_close")


def mask_display_name(name: Optional[str], reveal: bool = False) -> str:
    """Show other recruiters as 'First L.'; the viewer sees their full name."""
    name = (name or "").strip()
    if not name:
        return DEFAULT_DISPLAY_NAME
    if reveal:
        return name

    parts = name.split()
    if len(parts) > 1:
        return f"{parts[0]} {parts[-1][0]}."
    return name


def format_position_badge(position: int) -> str:
    return PODIUM_BADGES.get(position, f"#{position}")


def find_position(ranking: Sequence[RankedRecruiter], identifier: str) -> Optional[RankedRecruiter]:
    for entry in ranking:
        if entry.identifier == identifier:
            return entry
    return None


def _has_days(entry: RankedRecruiter) -> bool:
    return bool(entry.average_days_to_close)


def sort_ranking(ranking: Sequence[RankedRecruiter], column: str = "score",
                 ascending: bool = False) -> List[RankedRecruiter]:
    """
    Re-order the leaderboard by a single column for display.

    Positions are kept as computed by the global ranking. Ties on closed
    requisitions go to the faster recruiter, ties on days go to the recruiter
    with more closures, and recruiters without day data always sort last on
    the days column. Remaining ties fall back to the global position.

    Tie-breaks do not follow ``ascending``: they always favour the stronger
    recruiter, so an ascending closed_count sort still lists the faster of
    two recruiters with equal closures first.
    """
    if column not in SORTABLE_COLUMNS:
        raise ValueError(f"Cannot sort by '{column}', expected one of {SORTABLE_COLUMNS}")

    sign = 1 if ascending else -1

    if column == "score":
        key = lambda r: (sign * r.score, r.position)
    elif column == "closed_count":
        key = lambda r: (
            sign * r.closed_count,
            r.average_days_to_close if _has_days(r) else float("inf"),
            r.position
        )
    else:
        key = lambda r: (
            not _has_days(r),
            sign * (r.average_days_to_close or 0.0),
            -r.closed_count,
            r.position
        )

    return sorted(ranking, key=key)


def ranking_to_dataframe(ranking: Sequence[RankedRecruiter], viewer_id: Optional[str] = None) -> pd.DataFrame:
    """Build the leaderboard table shown in the dashboard."""
    columns = ['Position', 'Badge', 'Recruiter', 'Closed', 'Avg Days', 'Score', 'Percentile', 'You', 'recruiter_id']
    if not ranking:
        return pd.DataFrame(columns=columns)

    scores = [r.score for r in ranking]

    rows = []
    for r in ranking:
        is_viewer = r.identifier == viewer_id
        rows.append({
            'Position': r.position,
            'Badge': format_position_badge(r.position),
            'Recruiter': mask_display_name(r.display_name, reveal=is_viewer),
            'Closed': r.closed_count,
            'Avg Days': r.average_days_to_close if _has_days(r) else np.nan,
            'Score': r.score if r.score > 0 else np.nan,
            'Percentile': stats_module.percentileofscore(scores, r.score, kind='weak'),
            'You': is_viewer,
            'recruiter_id': r.identifier
        })

    return pd.DataFrame(rows, columns=columns)


def summarize_ranking(ranking: Sequence[RankedRecruiter]) -> Dict:
    """Compute headline statistics for the leaderboard."""
    active = [r for r in ranking if r.closed_count > 0]
    active_scores = np.array([r.score for r in active], dtype=float)
    days = np.array([r.average_days_to_close for r in active if _has_days(r)], dtype=float)

    return {
        'recruiters': len(ranking),
        'active_recruiters': len(active),
        'total_closed': int(sum(r.closed_count for r in ranking)),
        'mean_score': float(np.mean(active_scores)) if len(active_scores) else 0.0,
        'median_score': float(np.median(active_scores)) if len(active_scores) else 0.0,
        'median_days': float(np.median(days)) if len(days) else None,
        'leader': ranking[0] if ranking else None
    }
