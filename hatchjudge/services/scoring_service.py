"""
Scoring Service

Validates and records a judge's score for a (team, phase) pair.

VALIDATION ORDER:
1. Score parses as an integer in [0, 100]          -> InvalidScore
2. Phase index is a position in the phase sequence -> PhaseNotFound
3. Team is registered (eliminated teams are not)   -> TeamNotFound

WRITE:
- Upsert: an existing submission has its score overwritten in place; when
  no submission exists a bare scored record is created (or rejected when
  scoring without submission is disabled).
- Re-scoring overwrites. Identical repeats leave identical state.
- The phase clock is not consulted; closed phases can still be scored.
- Storage errors surface as StorageFailure with the prior score intact.
"""
import logging
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from hatchjudge.config.settings import settings
from hatchjudge.engine.errors import JudgingError, SubmissionNotFound, TeamNotFound
from hatchjudge.engine.phase_clock import check_phase_index
from hatchjudge.engine.scoring import parse_score
from hatchjudge.engine.submissions import find_submission
from hatchjudge.services.hackathon_store import HackathonStore
from hatchjudge.services.locks import LockRegistry, lock_registry

logger = logging.getLogger(__name__)


async def record_score(
    code: str,
    team_id: str,
    phase_index: int,
    raw_score: Any,
    db: AsyncSession,
    allow_without_submission: Optional[bool] = None,
    locks: Optional[LockRegistry] = None,
) -> Dict[str, Any]:
    """
    Record ``raw_score`` for ``team_id`` in phase ``phase_index``.

    Args:
        code: Hackathon code
        team_id: Registered team id
        phase_index: Zero-based phase position
        raw_score: Score as submitted by the judge (int or integer string)
        db: Database session
        allow_without_submission: Override for settings.SCORE_WITHOUT_SUBMISSION
        locks: Lock registry (process-wide registry by default)

    Returns:
        Dict with code, team_id, phase_index, score, previous_score, created

    Raises:
        InvalidScore, HackathonNotFound, PhaseNotFound, TeamNotFound,
        SubmissionNotFound, StorageFailure
    """
    if allow_without_submission is None:
        allow_without_submission = settings.SCORE_WITHOUT_SUBMISSION
    locks = locks or lock_registry

    try:
        score = parse_score(raw_score)
    except JudgingError:
        logger.warning(f"Rejected score {raw_score!r} for {code}/{team_id}/phase {phase_index}")
        raise

    store = HackathonStore(db)

    async with locks.scoring(code, team_id, phase_index):
        hackathon = await store.load(code)
        check_phase_index(hackathon, phase_index)
        if hackathon.find_team(team_id) is None:
            logger.warning(f"Score for unregistered team {team_id} in {code}")
            raise TeamNotFound(team_id)

        try:
            previous_score, created = await store.write_score(
                code, team_id, phase_index, score,
                create_missing=allow_without_submission,
            )
        except SubmissionNotFound:
            logger.warning(
                f"Scoring without submission is disabled: {code}/{team_id}/phase {phase_index}"
            )
            raise

    logger.info(
        f"Score recorded: hackathon={code} team={team_id} phase={phase_index} "
        f"score={score} previous={previous_score} created={created}"
    )
    return {
        "code": code,
        "team_id": team_id,
        "phase_index": phase_index,
        "score": score,
        "previous_score": previous_score,
        "created": created,
    }


async def preview_score(
    code: str,
    team_id: str,
    phase_index: int,
    raw_score: Any,
    db: AsyncSession,
    allow_without_submission: Optional[bool] = None,
) -> Dict[str, Any]:
    """Run the record_score checks and report the change it would make, without writing."""
    if allow_without_submission is None:
        allow_without_submission = settings.SCORE_WITHOUT_SUBMISSION

    score = parse_score(raw_score)
    hackathon = await HackathonStore(db).load(code)
    check_phase_index(hackathon, phase_index)
    team = hackathon.find_team(team_id)
    if team is None:
        raise TeamNotFound(team_id)

    submission = find_submission(team, phase_index)
    if submission is None and not allow_without_submission:
        raise SubmissionNotFound(team_id, phase_index)

    return {
        "code": code,
        "team_id": team_id,
        "phase_index": phase_index,
        "score": score,
        "previous_score": submission.score if submission is not None else None,
        "created": submission is None,
    }
