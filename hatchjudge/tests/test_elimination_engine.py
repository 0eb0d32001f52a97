"""
Unit Tests for the Elimination Engine and score parsing

Cutoff computation over ranked views; no database involved.
"""
from datetime import datetime

import pytest

from hatchjudge.engine.elimination import compute_cutoff, plan_elimination, validate_count
from hatchjudge.engine.errors import CannotEliminateAll, InvalidCount, InvalidScore
from hatchjudge.engine.models import (
    OVERALL, HackathonSnapshot, LeaderboardEntry, PhaseSnapshot, SubmissionSnapshot,
    TeamSnapshot,
)
from hatchjudge.engine.scoring import SCORE_MAX, SCORE_MIN, parse_score


def _view(scores):
    """Entries t1..tN with the given scores, already in ranked order."""
    entries = [
        LeaderboardEntry(
            team_id=f"t{position}",
            team_name=f"Team {position}",
            score=score,
            member_count=1,
            has_submission=True,
        )
        for position, score in enumerate(scores, start=1)
    ]
    return sorted(entries, key=lambda entry: (-entry.score, entry.team_id))


def _hackathon(phase_scores):
    """``phase_scores`` maps team id to {phase_index: score}."""
    return HackathonSnapshot(
        code="ELIM",
        phases=[
            PhaseSnapshot(name="Round 1", start_time=datetime(2026, 1, 1), end_time=datetime(2026, 1, 2)),
            PhaseSnapshot(name="Round 2", start_time=datetime(2026, 1, 3), end_time=datetime(2026, 1, 4)),
        ],
        registrations=[
            TeamSnapshot(
                team_id=team_id,
                submissions=[
                    SubmissionSnapshot(phase_index=index, deliverables={"demo": "url"}, score=score)
                    for index, score in scores.items()
                ],
            )
            for team_id, scores in phase_scores.items()
        ],
    )


# ==========================================
# Cutoff computation
# ==========================================

def test_tie_scenario_removes_more_than_requested():
    """[90, 80, 80, 60, 10] with count=1: cutoff 60 removes both 60 and 10."""
    result = compute_cutoff(_view([90, 80, 80, 60, 10]), 1, OVERALL)

    assert result.cutoff_score == 60
    assert sorted(result.eliminated_team_ids) == ["t4", "t5"]
    assert result.eliminated_count == 2
    assert sorted(result.remaining_team_ids) == ["t1", "t2", "t3"]


def test_ties_at_cutoff_are_all_eliminated():
    result = compute_cutoff(_view([90, 80, 80, 60, 10]), 2, OVERALL)

    # Position 5-2-1=2 holds one of the 80s
    assert result.cutoff_score == 80
    assert sorted(result.eliminated_team_ids) == ["t2", "t3", "t4", "t5"]
    assert result.remaining_team_ids == ["t1"]


def test_distinct_scores_remove_through_cutoff_entry():
    result = compute_cutoff(_view([50, 40, 30, 20]), 1, OVERALL)

    assert result.cutoff_score == 30
    assert result.eliminated_team_ids == ["t3", "t4"]
    assert result.remaining_team_ids == ["t1", "t2"]


def test_result_serializes_for_audit():
    result = compute_cutoff(_view([90, 80, 80, 60, 10]), 1, OVERALL)
    payload = result.to_dict()

    assert payload["scope"] == "overall"
    assert payload["requested_count"] == 1
    assert payload["eliminated_count"] == 2


@pytest.mark.parametrize("count", [5, 6, 100])
def test_count_at_or_above_view_size_is_rejected(count):
    with pytest.raises(CannotEliminateAll) as exc_info:
        compute_cutoff(_view([90, 80, 80, 60, 10]), count, OVERALL)
    assert exc_info.value.code == "CANNOT_ELIMINATE_ALL"


def test_cutoff_at_top_score_is_rejected():
    """A tie at the top would otherwise remove every team in the view."""
    with pytest.raises(CannotEliminateAll):
        compute_cutoff(_view([70, 70, 70]), 1, OVERALL)


def test_empty_view_cannot_be_eliminated():
    with pytest.raises(CannotEliminateAll):
        compute_cutoff([], 1, OVERALL)


# ==========================================
# Count validation
# ==========================================

@pytest.mark.parametrize("count", [0, -1, "0", "-3", "two", 1.5, None, True, "", "1.0"])
def test_invalid_counts(count):
    with pytest.raises(InvalidCount):
        validate_count(count)


@pytest.mark.parametrize("count, expected", [(1, 1), ("3", 3), (" 2 ", 2)])
def test_valid_counts(count, expected):
    assert validate_count(count) == expected


def test_invalid_count_checked_before_view_size():
    with pytest.raises(InvalidCount):
        compute_cutoff([], 0, OVERALL)


# ==========================================
# plan_elimination over a snapshot
# ==========================================

def test_phase_scope_only_considers_teams_in_phase_view():
    hackathon = _hackathon({
        "alpha": {0: 90, 1: 70},
        "bravo": {0: 60, 1: 20},
        "charlie": {0: 30, 1: 50},
        "delta": {0: 10},
    })

    result = plan_elimination(hackathon, 1, 1)

    assert result.cutoff_score == 50
    assert sorted(result.eliminated_team_ids) == ["bravo", "charlie"]
    assert result.remaining_team_ids == ["alpha"]
    assert "delta" not in result.eliminated_team_ids


def test_overall_scope_uses_total_scores():
    hackathon = _hackathon({
        "alpha": {0: 90, 1: 70},
        "bravo": {0: 60, 1: 20},
        "charlie": {0: 30, 1: 50},
        "delta": {0: 10},
    })

    result = plan_elimination(hackathon, OVERALL, 2)

    # Totals: alpha 160, bravo 80, charlie 80, delta 10; cutoff at position 1
    assert result.cutoff_score == 80
    assert sorted(result.eliminated_team_ids) == ["bravo", "charlie", "delta"]


# ==========================================
# Score parsing
# ==========================================

@pytest.mark.parametrize("raw, expected", [
    (0, 0), (100, 100), (55, 55), ("85", 85), (" 7 ", 7), ("+12", 12), (42.0, 42),
])
def test_parse_score_accepts_integers_in_range(raw, expected):
    assert parse_score(raw) == expected


@pytest.mark.parametrize("raw", [150, -1, 101, "101", "-1", "abc", "", "7.5", 7.5, None, True, [], {}])
def test_parse_score_rejects_invalid(raw):
    with pytest.raises(InvalidScore) as exc_info:
        parse_score(raw)
    assert exc_info.value.code == "INVALID_SCORE"


def test_score_bounds():
    assert (SCORE_MIN, SCORE_MAX) == (0, 100)
