"""
Elimination Engine (cutoff computation)

Given a ranked view and a number of teams to drop from the bottom, compute
the cutoff score and the set of teams at or below it.

The cutoff is the score of the last team that should survive, i.e. the
entry at position ``len(view) - count - 1`` of the descending view. Removal
is by value, not by rank: every team scoring <= cutoff is eliminated, so
ties at the cutoff can remove more than ``count`` teams. Tied teams are
treated alike and no tie-break is applied here. A cutoff that would leave
no team in the view is rejected like count >= len(view).
"""
from typing import Any, List

from hatchjudge.engine.errors import CannotEliminateAll, InvalidCount
from hatchjudge.engine.leaderboard import build_leaderboard
from hatchjudge.engine.models import (
    CutoffResult, HackathonSnapshot, LeaderboardEntry, LeaderboardScope,
)


def validate_count(count: Any) -> int:
    if isinstance(count, bool):
        raise InvalidCount(count)
    if isinstance(count, str):
        stripped = count.strip()
        if not stripped.isdigit():
            raise InvalidCount(count)
        count = int(stripped)
    if not isinstance(count, int) or count <= 0:
        raise InvalidCount(count)
    return count


def compute_cutoff(
    view: List[LeaderboardEntry],
    count: Any,
    scope: LeaderboardScope,
) -> CutoffResult:
    count = validate_count(count)
    if count >= len(view):
        raise CannotEliminateAll(count, len(view))

    ordered = sorted(view, key=lambda entry: (-entry.score, entry.team_id))
    cutoff_score = ordered[len(ordered) - count - 1].score

    eliminated = [entry.team_id for entry in ordered if entry.score <= cutoff_score]
    remaining = [entry.team_id for entry in ordered if entry.score > cutoff_score]
    if not remaining:
        # Cutoff equals the top score: every team in the view would go
        raise CannotEliminateAll(count, len(view))

    return CutoffResult(
        scope=scope,
        requested_count=count,
        cutoff_score=cutoff_score,
        eliminated_team_ids=eliminated,
        remaining_team_ids=remaining,
    )


def plan_elimination(
    hackathon: HackathonSnapshot,
    scope: LeaderboardScope,
    count: Any,
) -> CutoffResult:
    """Build the scoped leaderboard from ``hackathon`` and compute the cutoff."""
    validate_count(count)
    return compute_cutoff(build_leaderboard(hackathon, scope), count, scope)
