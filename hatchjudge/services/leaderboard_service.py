"""
Leaderboard Service

Read side of the judging engine. Loads a fresh snapshot on every call and
ranks it with the leaderboard builder; nothing is cached between calls.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from hatchjudge.engine.leaderboard import (
    build_leaderboard, pending_grades, resolve_scope, with_ranks,
)
from hatchjudge.engine.models import OVERALL
from hatchjudge.engine.phase_clock import active_phase_index, phase_timeline, resolve_phase_index
from hatchjudge.engine.submissions import find_submission, submission_state
from hatchjudge.services.hackathon_store import HackathonStore

logger = logging.getLogger(__name__)


async def get_leaderboard(code: str, scope: Any, db: AsyncSession) -> Dict[str, Any]:
    """
    Ranked leaderboard for ``scope``.

    ``scope`` is "overall", a phase index or a phase name. The response
    carries ``pending_grades`` so callers can tell ungraded entries (ranked
    as 0) from entries graded 0.
    """
    hackathon = await HackathonStore(db).load(code)
    resolved = resolve_scope(hackathon, scope)
    entries = build_leaderboard(hackathon, resolved)
    logger.debug(f"Leaderboard built: hackathon={code} scope={resolved} entries={len(entries)}")

    return {
        "code": code,
        "scope": resolved,
        "phase_name": None if resolved == OVERALL else hackathon.phases[resolved].name,
        "team_count": len(entries),
        "pending_grades": pending_grades(hackathon, resolved),
        "entries": with_ranks(entries),
    }


async def get_phase_overview(
    code: str,
    db: AsyncSession,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Phase timeline with lifecycle states and the active phase index."""
    now = now or datetime.utcnow()
    hackathon = await HackathonStore(db).load(code)
    return {
        "code": code,
        "now": now,
        "active_phase_index": active_phase_index(hackathon, now),
        "phases": phase_timeline(hackathon, now),
    }


async def get_judging_sheet(code: str, phase: Any, db: AsyncSession) -> List[Dict[str, Any]]:
    """
    Per-team judging state for one phase: scored, awaiting score, or no
    submission, with the current score where one exists.
    """
    hackathon = await HackathonStore(db).load(code)
    phase_index = resolve_phase_index(hackathon, phase)

    sheet = []
    for team in hackathon.registrations:
        state = submission_state(team, phase_index)
        submission = find_submission(team, phase_index)
        sheet.append({
            "team_id": team.team_id,
            "team_name": team.display_name,
            "phase_index": phase_index,
            "state": state.value,
            "score": submission.score if submission else None,
            "deliverables": dict(submission.deliverables) if submission else {},
            "submitted_at": submission.submitted_at if submission else None,
        })
    return sheet
