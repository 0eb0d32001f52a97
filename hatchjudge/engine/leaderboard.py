"""
Leaderboard Builder

Ranked, read-only views over a hackathon snapshot.

RANKING:
1. score DESC
2. team_id ASC (deterministic tie-break)

Phase views only contain teams that submitted deliverables for the phase;
a submitted-but-unscored team ranks with score 0. The overall view contains
every registered team, including teams with no submissions.

Views are rebuilt on every call. Nothing is cached.
"""
from typing import Any, Dict, List

from hatchjudge.engine.errors import PhaseNotFound
from hatchjudge.engine.models import (
    OVERALL, HackathonSnapshot, LeaderboardEntry, LeaderboardScope,
)
from hatchjudge.engine.phase_clock import check_phase_index, resolve_phase_index
from hatchjudge.engine.submissions import find_submission, has_submission, total_score


def _ranked(entries: List[LeaderboardEntry]) -> List[LeaderboardEntry]:
    return sorted(entries, key=lambda entry: (-entry.score, entry.team_id))


def phase_leaderboard(hackathon: HackathonSnapshot, phase_index: int) -> List[LeaderboardEntry]:
    check_phase_index(hackathon, phase_index)

    entries = []
    for team in hackathon.registrations:
        if not has_submission(team, phase_index):
            continue
        submission = find_submission(team, phase_index)
        entries.append(LeaderboardEntry(
            team_id=team.team_id,
            team_name=team.display_name,
            score=submission.score or 0,
            member_count=team.member_count,
            has_submission=True,
        ))
    return _ranked(entries)


def overall_leaderboard(hackathon: HackathonSnapshot) -> List[LeaderboardEntry]:
    entries = [
        LeaderboardEntry(
            team_id=team.team_id,
            team_name=team.display_name,
            score=total_score(team),
            member_count=team.member_count,
            has_submission=any(
                has_submission(team, index) for index in range(len(hackathon.phases))
            ),
        )
        for team in hackathon.registrations
    ]
    return _ranked(entries)


def resolve_scope(hackathon: HackathonSnapshot, scope: Any) -> LeaderboardScope:
    """Normalize ``"overall"``, a phase index or a phase name into a scope."""
    if scope is None or (isinstance(scope, str) and scope.strip().lower() == OVERALL):
        return OVERALL
    return resolve_phase_index(hackathon, scope)


def build_leaderboard(hackathon: HackathonSnapshot, scope: LeaderboardScope) -> List[LeaderboardEntry]:
    if scope == OVERALL:
        return overall_leaderboard(hackathon)
    if isinstance(scope, int) and not isinstance(scope, bool):
        return phase_leaderboard(hackathon, scope)
    raise PhaseNotFound(scope, len(hackathon.phases))


def pending_grades(hackathon: HackathonSnapshot, scope: LeaderboardScope) -> int:
    """
    Count submitted-but-unscored (team, phase) cells within ``scope``.

    Leaderboards rank these as 0; this count lets a caller tell "not yet
    graded" apart from "graded zero".
    """
    if scope == OVERALL:
        phase_indexes = range(len(hackathon.phases))
    else:
        check_phase_index(hackathon, scope)
        phase_indexes = [scope]

    pending = 0
    for team in hackathon.registrations:
        for index in phase_indexes:
            submission = find_submission(team, index)
            if submission is not None and submission.deliverables and submission.score is None:
                pending += 1
    return pending


def with_ranks(entries: List[LeaderboardEntry]) -> List[Dict[str, Any]]:
    """Serialize entries with 1-based competition ranks (ties share a rank)."""
    ranked = []
    previous_score = None
    rank = 0
    for position, entry in enumerate(entries, start=1):
        if entry.score != previous_score:
            rank = position
            previous_score = entry.score
        row = entry.to_dict()
        row["rank"] = rank
        ranked.append(row)
    return ranked
