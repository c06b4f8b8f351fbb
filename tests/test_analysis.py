"""
Tests for leaderboard analysis helpers.

These tests verify:
1. Name masking and podium badges
2. Display re-ordering keeps global positions
3. Leaderboard table and summary statistics
"""

import math

import pytest

from src.models import RecruiterAggregate
from src.ranking import build_ranking
from src.analysis import (
    mask_display_name,
    format_position_badge,
    find_position,
    sort_ranking,
    ranking_to_dataframe,
    summarize_ranking,
)


# =============================================================================
# TEST FIXTURES
# =============================================================================

@pytest.fixture
def ranking():
    return build_ranking([
        RecruiterAggregate("u1", "Ana María López", 10, 5),     # 200
        RecruiterAggregate("u2", "Carlos Méndez", 5, 10),       # 50
        RecruiterAggregate("u3", "Lucía Ruiz", 0, None),        # 0
        RecruiterAggregate("u4", "Jorge Salinas", 5, 2.5),      # 200
    ])


# =============================================================================
# FORMATTING
# =============================================================================

class TestMaskDisplayName:
    """Test how other recruiters' names are shown."""

    def test_hides_surname(self):
        assert mask_display_name("Ana María López") == "Ana L."

    def test_viewer_sees_full_name(self):
        assert mask_display_name("Ana María López", reveal=True) == "Ana María López"

    def test_single_name_unchanged(self):
        assert mask_display_name("Diego") == "Diego"

    def test_blank_name_gets_default(self):
        assert mask_display_name("   ") == "Reclutador"
        assert mask_display_name(None) == "Reclutador"


class TestPositionBadge:

    def test_podium(self):
        assert format_position_badge(1) == "🏆"
        assert format_position_badge(2) == "🥈"
        assert format_position_badge(3) == "🥉"

    def test_rest(self):
        assert format_position_badge(4) == "#4"


# =============================================================================
# LOOKUP AND ORDERING
# =============================================================================

class TestFindPosition:

    def test_found(self, ranking):
        assert find_position(ranking, "u2").position == 3

    def test_not_found(self, ranking):
        assert find_position(ranking, "nobody") is None


class TestSortRanking:
    """Test display re-ordering."""

    def test_global_order(self, ranking):
        assert [r.identifier for r in ranking] == ["u1", "u4", "u2", "u3"]

    def test_score_ascending(self, ranking):
        ordered = sort_ranking(ranking, "score", ascending=True)

        assert [r.identifier for r in ordered] == ["u3", "u2", "u1", "u4"]

    def test_closed_count_ties_go_to_fewer_days(self, ranking):
        ordered = sort_ranking(ranking, "closed_count", ascending=False)

        assert [r.identifier for r in ordered] == ["u1", "u4", "u2", "u3"]

    def test_closed_count_ascending_keeps_tie_break_direction(self, ranking):
        """Tied closures still go to fewer days when sorting ascending."""
        ordered = sort_ranking(ranking, "closed_count", ascending=True)

        assert [r.identifier for r in ordered] == ["u3", "u4", "u2", "u1"]

    def test_days_without_data_always_last(self, ranking):
        ascending = sort_ranking(ranking, "average_days_to_close", ascending=True)
        descending = sort_ranking(ranking, "average_days_to_close", ascending=False)

        assert [r.identifier for r in ascending] == ["u4", "u1", "u2", "u3"]
        assert [r.identifier for r in descending] == ["u2", "u1", "u4", "u3"]

    def test_positions_unchanged(self, ranking):
        ordered = sort_ranking(ranking, "score", ascending=True)

        assert {r.identifier: r.position for r in ordered} == {r.identifier: r.position for r in ranking}

    def test_input_not_reordered(self, ranking):
        before = list(ranking)
        sort_ranking(ranking, "average_days_to_close", ascending=True)

        assert ranking == before

    def test_unknown_column(self, ranking):
        with pytest.raises(ValueError):
            sort_ranking(ranking, "display_name")


# =============================================================================
# TABLE AND SUMMARY
# =============================================================================

class TestRankingToDataframe:
    """Test the leaderboard table."""

    def test_columns_and_rows(self, ranking):
        df = ranking_to_dataframe(ranking, viewer_id="u2")

        assert list(df['Position']) == [1, 2, 3, 4]
        assert list(df['Badge']) == ["🏆", "🥈", "🥉", "#4"]
        assert list(df['Recruiter']) == ["Ana L.", "Jorge S.", "Carlos Méndez", "Lucía R."]
        assert list(df['You']) == [False, False, True, False]

    def test_zero_score_and_missing_days_are_blank(self, ranking):
        df = ranking_to_dataframe(ranking)
        last = df.iloc[-1]

        assert math.isnan(last['Score'])
        assert math.isnan(last['Avg Days'])

    def test_percentile(self, ranking):
        df = ranking_to_dataframe(ranking)

        assert list(df['Percentile']) == pytest.approx([100.0, 100.0, 50.0, 25.0])

    def test_empty(self):
        df = ranking_to_dataframe([])

        assert df.empty
        assert 'Score' in df.columns


class TestSummarizeRanking:
    """Test headline statistics."""

    def test_summary(self, ranking):
        summary = summarize_ranking(ranking)

        assert summary['recruiters'] == 4
        assert summary['active_recruiters'] == 3
        assert summary['total_closed'] == 20
        assert summary['mean_score'] == pytest.approx(150.0)
        assert summary['median_score'] == pytest.approx(200.0)
        assert summary['median_days'] == pytest.approx(5.0)
        assert summary['leader'].identifier == "u1"

    def test_empty(self):
        summary = summarize_ranking([])

        assert summary['recruiters'] == 0
        assert summary['mean_score'] == 0.0
        assert summary['median_days'] is None
        assert summary['leader'] is None
