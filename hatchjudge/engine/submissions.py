"""
Submission Store Accessor

Lookups over a team's submission collection keyed by phase index. A
submission row with an empty deliverables mapping is a draft and does not
count as submitted.
"""
from typing import Optional

from hatchjudge.engine.models import SubmissionSnapshot, SubmissionState, TeamSnapshot


def find_submission(team: TeamSnapshot, phase_index: int) -> Optional[SubmissionSnapshot]:
    for submission in team.submissions or []:
        if submission.phase_index == phase_index:
            return submission
    return None


def has_submission(team: TeamSnapshot, phase_index: int) -> bool:
    submission = find_submission(team, phase_index)
    return submission is not None and bool(submission.deliverables)


def submission_state(team: TeamSnapshot, phase_index: int) -> SubmissionState:
    """
    Judging view state for one (team, phase) cell.

    A recorded score wins over submission presence, since judges may score a
    team that never submitted.
    """
    submission = find_submission(team, phase_index)
    if submission is not None and submission.score is not None:
        return SubmissionState.SCORED
    if has_submission(team, phase_index):
        return SubmissionState.AWAITING_SCORE
    return SubmissionState.NO_SUBMISSION


def total_score(team: TeamSnapshot) -> int:
    """Sum of recorded scores across phases; unscored submissions add 0."""
    return sum(submission.score or 0 for submission in team.submissions or [])
