"""
Hackathon Store

Persistence collaborator for the judging engine. Reads the full hackathon
aggregate as a snapshot and applies the engine's writes. Every write is a
single transaction: it either commits completely or is rolled back and
reported as StorageFailure. Nothing is retried here.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hatchjudge.engine.errors import (
    HackathonNotFound, JudgingError, StaleSnapshot, StorageFailure, SubmissionNotFound,
    TeamNotFound,
)
from hatchjudge.engine.models import HackathonSnapshot, LeaderboardScope
from hatchjudge.orm.elimination import EliminationRecord
from hatchjudge.orm.hackathon import Hackathon
from hatchjudge.orm.registration import Registration, Submission

logger = logging.getLogger(__name__)


class HackathonStore:
    """Async store over one AsyncSession. Not safe to share between tasks."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # =========================================================================
    # Reads
    # =========================================================================

    async def load(self, code: str) -> HackathonSnapshot:
        """
        Read the hackathon aggregate by code.

        ``populate_existing`` forces a fresh read even when the session
        already holds the rows, so callers never rank a stale registration set.
        """
        try:
            result = await self.db.execute(
                select(Hackathon)
                .where(Hackathon.code == code)
                .options(
                    selectinload(Hackathon.phases),
                    selectinload(Hackathon.registrations).selectinload(Registration.submissions),
                )
                .execution_options(populate_existing=True)
            )
            hackathon = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Failed to load hackathon {code}: {type(e).__name__}: {str(e)}")
            raise StorageFailure("load", e) from e

        if hackathon is None:
            raise HackathonNotFound(code)
        return hackathon.to_snapshot()

    async def list_eliminations(self, code: str) -> List[Dict[str, Any]]:
        try:
            result = await self.db.execute(
                select(EliminationRecord)
                .where(EliminationRecord.hackathon_code == code)
                .order_by(EliminationRecord.created_at, EliminationRecord.id)
            )
            return [record.to_dict() for record in result.scalars().all()]
        except SQLAlchemyError as e:
            raise StorageFailure("list_eliminations", e) from e

    # =========================================================================
    # Writes
    # =========================================================================

    async def write_score(
        self,
        code: str,
        team_id: str,
        phase_index: int,
        score: int,
        create_missing: bool = True,
    ) -> Tuple[Optional[int], bool]:
        """
        Upsert the score of (team, phase).

        Returns ``(previous_score, created)``. ``created`` is True when no
        submission row existed and a bare scored record was inserted.
        """
        try:
            registration = await self._get_registration(code, team_id)
            submission = _find_row(registration, phase_index)

            previous_score = None
            created = False
            if submission is None:
                if not create_missing:
                    raise SubmissionNotFound(team_id, phase_index)
                submission = Submission(
                    registration_id=registration.id,
                    phase_index=phase_index,
                    deliverables={},
                    submitted_at=None,
                    score=score,
                )
                self.db.add(submission)
                created = True
            else:
                previous_score = submission.score
                submission.score = score

            await self._bump_version(code)
            await self.db.commit()
            return previous_score, created
        except JudgingError:
            await self.db.rollback()
            raise
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                f"Score write failed for {code}/{team_id}/phase {phase_index}: "
                f"{type(e).__name__}: {str(e)}"
            )
            raise StorageFailure("write_score", e) from e

    async def write_submission(
        self,
        code: str,
        team_id: str,
        phase_index: int,
        deliverables: Dict[str, str],
        submitted_at: datetime,
    ) -> bool:
        """
        Upsert the deliverables of (team, phase), preserving any score.

        Returns True when a new row was created.
        """
        try:
            registration = await self._get_registration(code, team_id)
            submission = _find_row(registration, phase_index)

            created = submission is None
            if created:
                submission = Submission(
                    registration_id=registration.id,
                    phase_index=phase_index,
                    score=None,
                )
                self.db.add(submission)
            # Reassign so the JSON column is flagged dirty
            submission.deliverables = dict(deliverables)
            submission.submitted_at = submitted_at

            await self._bump_version(code)
            await self.db.commit()
            return created
        except JudgingError:
            await self.db.rollback()
            raise
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                f"Submission write failed for {code}/{team_id}/phase {phase_index}: "
                f"{type(e).__name__}: {str(e)}"
            )
            raise StorageFailure("write_submission", e) from e

    async def write_elimination(
        self,
        code: str,
        scope: LeaderboardScope,
        cutoff_score: int,
        team_ids: List[str],
        requested_count: int,
        performed_by: Optional[str] = None,
        expected_version: Optional[int] = None,
    ) -> EliminationRecord:
        """
        Remove ``team_ids`` from the registration set, all or nothing.

        The audit record is added in the same transaction. If any listed team
        is no longer registered the whole write is rolled back.

        With ``expected_version`` the write is a compare-and-swap on the
        hackathon version: any score or submission committed since that
        version was read raises StaleSnapshot and nothing is removed.
        """
        try:
            if not await self._bump_version(code, expected_version):
                if expected_version is None:
                    raise HackathonNotFound(code)
                raise StaleSnapshot(code, expected_version)

            result = await self.db.execute(
                select(Registration)
                .join(Hackathon, Registration.hackathon_id == Hackathon.id)
                .where(Hackathon.code == code, Registration.team_id.in_(team_ids))
                .options(selectinload(Registration.submissions))
            )
            registrations = result.scalars().all()

            found = {registration.team_id for registration in registrations}
            missing = sorted(set(team_ids) - found)
            if missing:
                raise TeamNotFound(missing[0])

            for registration in registrations:
                await self.db.delete(registration)

            record = EliminationRecord(
                hackathon_code=code,
                scope=str(scope),
                requested_count=requested_count,
                cutoff_score=cutoff_score,
                eliminated_team_ids=list(team_ids),
                performed_by=performed_by,
            )
            self.db.add(record)

            await self.db.commit()
            return record
        except JudgingError:
            await self.db.rollback()
            raise
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                f"Elimination write failed for {code} ({len(team_ids)} teams): "
                f"{type(e).__name__}: {str(e)}"
            )
            raise StorageFailure("write_elimination", e) from e

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _bump_version(self, code: str, expected: Optional[int] = None) -> bool:
        """Increment the hackathon version inside the current transaction."""
        stmt = update(Hackathon).where(Hackathon.code == code)
        if expected is not None:
            stmt = stmt.where(Hackathon.version == expected)
        result = await self.db.execute(
            stmt.values(version=Hackathon.version + 1).execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def _get_registration(self, code: str, team_id: str) -> Registration:
        result = await self.db.execute(
            select(Registration)
            .join(Hackathon, Registration.hackathon_id == Hackathon.id)
            .where(Hackathon.code == code, Registration.team_id == team_id)
            .options(selectinload(Registration.submissions))
            .execution_options(populate_existing=True)
        )
        registration = result.scalar_one_or_none()
        if registration is None:
            raise TeamNotFound(team_id)
        return registration


def _find_row(registration: Registration, phase_index: int) -> Optional[Submission]:
    for submission in registration.submissions:
        if submission.phase_index == phase_index:
            return submission
    return None
