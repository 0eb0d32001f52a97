"""
Judging engine errors.

Every failure the engine can report is a JudgingError carrying a
machine-readable code. The API layer maps codes onto HTTP responses.
"""
from typing import Any, Optional


class JudgingError(Exception):
    """Base exception for judging engine errors."""
    def __init__(self, message: str, code: str = "JUDGING_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class InvalidScore(JudgingError):
    def __init__(self, raw_score: Any, min_score: int = 0, max_score: int = 100):
        self.raw_score = raw_score
        super().__init__(
            f"Score must be an integer between {min_score} and {max_score}, got {raw_score!r}",
            "INVALID_SCORE"
        )


class PhaseNotFound(JudgingError):
    def __init__(self, phase: Any, phase_count: Optional[int] = None):
        self.phase = phase
        message = f"Phase {phase!r} not found"
        if phase_count is not None:
            message = f"{message} (hackathon has {phase_count} phases)"
        super().__init__(message, "PHASE_NOT_FOUND")


class TeamNotFound(JudgingError):
    def __init__(self, team_id: str):
        self.team_id = team_id
        super().__init__(f"Team {team_id} is not registered", "TEAM_NOT_FOUND")


class HackathonNotFound(JudgingError):
    def __init__(self, code: str):
        self.hackathon_code = code
        super().__init__(f"Hackathon {code} not found", "HACKATHON_NOT_FOUND")


class SubmissionNotFound(JudgingError):
    def __init__(self, team_id: str, phase_index: int):
        super().__init__(
            f"Team {team_id} has no submission for phase {phase_index}",
            "SUBMISSION_NOT_FOUND"
        )


class InvalidCount(JudgingError):
    def __init__(self, count: Any):
        self.count = count
        super().__init__(
            f"Elimination count must be a positive integer, got {count!r}",
            "INVALID_COUNT"
        )


class CannotEliminateAll(JudgingError):
    def __init__(self, count: int, team_count: int):
        self.count = count
        self.team_count = team_count
        super().__init__(
            f"Cannot eliminate {count} of {team_count} teams: at least one team must remain",
            "CANNOT_ELIMINATE_ALL"
        )


class PhaseNotActive(JudgingError):
    def __init__(self, phase_index: int, status: str):
        self.phase_index = phase_index
        self.status = status
        super().__init__(
            f"Phase {phase_index} is {status}, submissions are closed",
            "PHASE_NOT_ACTIVE"
        )


class InvalidSubmission(JudgingError):
    def __init__(self, message: str):
        super().__init__(message, "INVALID_SUBMISSION")


class StorageFailure(JudgingError):
    """Raised when the persistence collaborator fails. Never retried here."""
    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        self.operation = operation
        self.cause = cause
        detail = f": {type(cause).__name__}" if cause is not None else ""
        super().__init__(f"Storage failure during {operation}{detail}", "STORAGE_FAILURE")


class StaleSnapshot(JudgingError):
    """Raised when the hackathon changed between planning and applying a write."""
    def __init__(self, code: str, expected_version: int):
        self.hackathon_code = code
        self.expected_version = expected_version
        super().__init__(
            f"Hackathon {code} changed after version {expected_version} was read; "
            f"recompute and retry",
            "STALE_SNAPSHOT"
        )
