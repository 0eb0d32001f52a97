"""
Unit Tests for the Leaderboard Builder and submission lookups

Phase and overall views over in-memory snapshots.
"""
from datetime import datetime, timedelta

import pytest

from hatchjudge.engine.errors import PhaseNotFound
from hatchjudge.engine.leaderboard import (
    build_leaderboard,
    overall_leaderboard,
    pending_grades,
    phase_leaderboard,
    resolve_scope,
    with_ranks,
)
from hatchjudge.engine.models import (
    OVERALL,
    HackathonSnapshot,
    PhaseSnapshot,
    SubmissionSnapshot,
    SubmissionState,
    TeamSnapshot,
)
from hatchjudge.engine.submissions import (
    find_submission, has_submission, submission_state, total_score,
)

T0 = datetime(2026, 5, 1)


def _phases(count=3):
    return [
        PhaseSnapshot(
            name=f"Phase {index}",
            start_time=T0 + timedelta(days=index * 7),
            end_time=T0 + timedelta(days=index * 7 + 3),
        )
        for index in range(count)
    ]


def _submission(phase_index, score=None, deliverables=None):
    if deliverables is None:
        deliverables = {"github": f"https://example.com/{phase_index}"}
    return SubmissionSnapshot(phase_index=phase_index, deliverables=deliverables, score=score)


def _team(team_id, *submissions, members=1):
    return TeamSnapshot(
        team_id=team_id,
        team_name=f"Team {team_id}",
        leader={"name": "lead"},
        members=[{"name": f"m{i}"} for i in range(members)],
        submissions=list(submissions),
    )


def _hackathon(*teams):
    return HackathonSnapshot(code="LB", phases=_phases(), registrations=list(teams))


# ==========================================
# Submission Store Accessor
# ==========================================

def test_find_submission_by_phase_index():
    team = _team("a", _submission(0, 10), _submission(2, 30))
    assert find_submission(team, 2).score == 30
    assert find_submission(team, 1) is None


def test_empty_deliverables_is_not_a_submission():
    team = _team("a", _submission(0, deliverables={}))
    assert find_submission(team, 0) is not None
    assert has_submission(team, 0) is False


def test_submission_state_cells():
    team = _team(
        "a",
        _submission(0, score=55),
        _submission(1),
        _submission(2, score=40, deliverables={}),
    )
    assert submission_state(team, 0) is SubmissionState.SCORED
    assert submission_state(team, 1) is SubmissionState.AWAITING_SCORE
    # Judges may score teams that never submitted
    assert submission_state(team, 2) is SubmissionState.SCORED
    assert submission_state(_team("b"), 0) is SubmissionState.NO_SUBMISSION


def test_overall_total_counts_unscored_as_zero():
    team = _team("a", _submission(0, 40), _submission(1, 35), _submission(2))
    assert total_score(team) == 75

    entries = overall_leaderboard(_hackathon(team))
    assert entries[0].score == 75


# ==========================================
# Phase leaderboard
# ==========================================

def test_phase_view_excludes_absent_and_empty_submissions():
    hackathon = _hackathon(
        _team("scored", _submission(1, 70)),
        _team("unscored", _submission(1)),
        _team("draft", _submission(1, 90, deliverables={})),
        _team("absent", _submission(0, 100)),
    )

    entries = phase_leaderboard(hackathon, 1)

    assert [entry.team_id for entry in entries] == ["scored", "unscored"]
    assert entries[1].score == 0
    assert all(entry.has_submission for entry in entries)


def test_phase_view_sorted_desc_with_team_id_tie_break():
    hackathon = _hackathon(
        _team("charlie", _submission(0, 80)),
        _team("alpha", _submission(0, 80)),
        _team("bravo", _submission(0, 95)),
        _team("delta", _submission(0, 10)),
    )

    entries = phase_leaderboard(hackathon, 0)

    assert [entry.team_id for entry in entries] == ["bravo", "alpha", "charlie", "delta"]


def test_phase_view_unknown_index_raises():
    with pytest.raises(PhaseNotFound):
        phase_leaderboard(_hackathon(), 3)


def test_member_count_includes_leader():
    entries = phase_leaderboard(_hackathon(_team("a", _submission(0, 1), members=3)), 0)
    assert entries[0].member_count == 4


# ==========================================
# Overall leaderboard
# ==========================================

def test_overall_view_includes_teams_without_submissions():
    hackathon = _hackathon(
        _team("busy", _submission(0, 20), _submission(1, 20)),
        _team("idle"),
    )

    entries = overall_leaderboard(hackathon)

    assert [(entry.team_id, entry.score) for entry in entries] == [("busy", 40), ("idle", 0)]
    assert entries[1].has_submission is False


def test_views_are_recomputed_from_current_snapshot():
    hackathon = _hackathon(_team("a", _submission(0, 10)), _team("b", _submission(0, 20)))
    first = overall_leaderboard(hackathon)

    hackathon.registrations = [team for team in hackathon.registrations if team.team_id != "b"]
    second = overall_leaderboard(hackathon)

    assert [entry.team_id for entry in first] == ["b", "a"]
    assert [entry.team_id for entry in second] == ["a"]


# ==========================================
# Scope resolution, ranks, pending grades
# ==========================================

@pytest.mark.parametrize("scope", [None, "overall", "Overall", " OVERALL "])
def test_resolve_scope_overall(scope):
    assert resolve_scope(_hackathon(), scope) == OVERALL


def test_resolve_scope_phase_name_and_index():
    hackathon = _hackathon()
    assert resolve_scope(hackathon, "Phase 2") == 2
    assert resolve_scope(hackathon, 1) == 1
    assert resolve_scope(hackathon, "0") == 0


def test_build_leaderboard_dispatches_on_scope():
    hackathon = _hackathon(_team("a", _submission(0, 10), _submission(1, 5)))
    assert build_leaderboard(hackathon, OVERALL)[0].score == 15
    assert build_leaderboard(hackathon, 1)[0].score == 5


def test_with_ranks_shares_rank_on_ties():
    hackathon = _hackathon(
        _team("a", _submission(0, 90)),
        _team("b", _submission(0, 80)),
        _team("c", _submission(0, 80)),
        _team("d", _submission(0, 10)),
    )

    ranked = with_ranks(phase_leaderboard(hackathon, 0))

    assert [row["rank"] for row in ranked] == [1, 2, 2, 4]


def test_pending_grades_counts_unscored_submissions():
    hackathon = _hackathon(
        _team("a", _submission(0, 50), _submission(1)),
        _team("b", _submission(1), _submission(2, deliverables={})),
        _team("c", _submission(1, 0)),
    )

    assert pending_grades(hackathon, OVERALL) == 2
    assert pending_grades(hackathon, 1) == 2
    assert pending_grades(hackathon, 0) == 0
