"""
Submission Service

Deliverable intake for a team and phase, gated by the phase clock.

- The phase must be active at ``now`` (both window boundaries included).
- Deliverables are a mapping of deliverable type to value; blank values
  are dropped and an all-blank payload is rejected.
- Resubmitting replaces the deliverables of the existing row and keeps any
  score a judge already recorded.
"""
import logging
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from hatchjudge.engine.errors import InvalidSubmission, PhaseNotActive, TeamNotFound
from hatchjudge.engine.models import PhaseStatus
from hatchjudge.engine.phase_clock import phase_status, resolve_phase_index
from hatchjudge.services.hackathon_store import HackathonStore
from hatchjudge.services.locks import LockRegistry, lock_registry

logger = logging.getLogger(__name__)


def clean_deliverables(deliverables: Any) -> Dict[str, str]:
    if not isinstance(deliverables, Mapping):
        raise InvalidSubmission("Deliverables must be a mapping of type to value")

    cleaned = {}
    for key, value in deliverables.items():
        if not isinstance(key, str) or not key.strip():
            raise InvalidSubmission(f"Invalid deliverable type {key!r}")
        if value is None:
            continue
        if not isinstance(value, str):
            raise InvalidSubmission(f"Deliverable {key!r} must be a string")
        if value.strip():
            cleaned[key.strip()] = value.strip()

    if not cleaned:
        raise InvalidSubmission("At least one deliverable must be provided")
    return cleaned


async def submit_deliverables(
    code: str,
    team_id: str,
    phase: Any,
    deliverables: Any,
    db: AsyncSession,
    now: Optional[datetime] = None,
    locks: Optional[LockRegistry] = None,
) -> Dict[str, Any]:
    """
    Upsert a team's deliverables for a phase.

    Raises:
        InvalidSubmission, HackathonNotFound, PhaseNotFound, TeamNotFound,
        PhaseNotActive, StorageFailure
    """
    now = now or datetime.utcnow()
    locks = locks or lock_registry
    cleaned = clean_deliverables(deliverables)
    store = HackathonStore(db)

    hackathon = await store.load(code)
    phase_index = resolve_phase_index(hackathon, phase)

    async with locks.scoring(code, team_id, phase_index):
        hackathon = await store.load(code)
        if hackathon.find_team(team_id) is None:
            raise TeamNotFound(team_id)

        status = phase_status(hackathon.phases[phase_index], now)
        if status is not PhaseStatus.ACTIVE:
            logger.warning(
                f"Submission for {code}/{team_id} rejected: phase {phase_index} is {status.value}"
            )
            raise PhaseNotActive(phase_index, status.value)

        created = await store.write_submission(code, team_id, phase_index, cleaned, now)

    logger.info(
        f"Submission {'created' if created else 'updated'}: hackathon={code} "
        f"team={team_id} phase={phase_index} deliverables={sorted(cleaned)}"
    )
    return {
        "code": code,
        "team_id": team_id,
        "phase_index": phase_index,
        "deliverables": cleaned,
        "submitted_at": now,
        "created": created,
    }
