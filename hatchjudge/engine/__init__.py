"""
Pure judging engine: phase clock, submission lookups, leaderboards and
elimination cutoffs over in-memory hackathon snapshots.
"""
from hatchjudge.engine.elimination import compute_cutoff, plan_elimination, validate_count
from hatchjudge.engine.errors import (
    CannotEliminateAll, HackathonNotFound, InvalidCount, InvalidScore, InvalidSubmission,
    JudgingError, PhaseNotActive, PhaseNotFound, StaleSnapshot, StorageFailure,
    SubmissionNotFound, TeamNotFound,
)
from hatchjudge.engine.leaderboard import (
    build_leaderboard, overall_leaderboard, pending_grades, phase_leaderboard, resolve_scope,
    with_ranks,
)
from hatchjudge.engine.models import (
    OVERALL, CutoffResult, HackathonSnapshot, LeaderboardEntry, PhaseSnapshot, PhaseStatus,
    SubmissionSnapshot, SubmissionState, TeamSnapshot,
)
from hatchjudge.engine.phase_clock import (
    active_phase_index, phase_status, phase_timeline, resolve_phase_index,
)
from hatchjudge.engine.scoring import SCORE_MAX, SCORE_MIN, parse_score
from hatchjudge.engine.submissions import find_submission, has_submission, submission_state

__all__ = [
    "OVERALL",
    "SCORE_MAX",
    "SCORE_MIN",
    "CannotEliminateAll",
    "CutoffResult",
    "HackathonNotFound",
    "HackathonSnapshot",
    "InvalidCount",
    "InvalidScore",
    "InvalidSubmission",
    "JudgingError",
    "LeaderboardEntry",
    "PhaseNotActive",
    "PhaseNotFound",
    "PhaseSnapshot",
    "PhaseStatus",
    "StaleSnapshot",
    "StorageFailure",
    "SubmissionNotFound",
    "SubmissionSnapshot",
    "SubmissionState",
    "TeamNotFound",
    "TeamSnapshot",
    "active_phase_index",
    "build_leaderboard",
    "compute_cutoff",
    "find_submission",
    "has_submission",
    "overall_leaderboard",
    "parse_score",
    "pending_grades",
    "phase_leaderboard",
    "phase_status",
    "phase_timeline",
    "plan_elimination",
    "resolve_phase_index",
    "resolve_scope",
    "submission_state",
    "validate_count",
    "with_ranks",
]
