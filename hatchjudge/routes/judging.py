"""
Judging Router

API endpoints for phase timelines, scoring, submissions, leaderboards and
eliminations.

Security:
- Scoring and elimination require admin membership in the hackathon
- Submissions and read endpoints require an authenticated principal
- Score and elimination writes are rate limited
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy.ext.asyncio import AsyncSession

from hatchjudge.config.settings import settings
from hatchjudge.database import get_db
from hatchjudge.engine.errors import JudgingError
from hatchjudge.engine.phase_clock import resolve_phase_index
from hatchjudge.engine.scoring import parse_score
from hatchjudge.errors import judging_error_to_api_error
from hatchjudge.schemas.judging import (
    EliminationRecordResponse,
    EliminationRequest,
    EliminationResponse,
    JudgingSheetRow,
    LeaderboardResponse,
    PhaseOverviewResponse,
    ScoreRequest,
    ScoreResponse,
    SubmissionRequest,
    SubmissionResponse,
)
from hatchjudge.security.principal import Principal, get_current_principal, require_hackathon_admin
from hatchjudge.services import elimination_service as elim_svc
from hatchjudge.services import leaderboard_service as lb_svc
from hatchjudge.services import scoring_service as score_svc
from hatchjudge.services import submission_service as sub_svc
from hatchjudge.services.hackathon_store import HackathonStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/hackathons", tags=["judging"])
limiter = Limiter(key_func=get_remote_address)


async def _resolve_phase(code: str, phase: str, db: AsyncSession) -> int:
    """Resolve an index or phase name from the path to a phase index."""
    hackathon = await HackathonStore(db).load(code)
    return resolve_phase_index(hackathon, phase)


# =============================================================================
# Phase Timeline
# =============================================================================

@router.get("/{code}/phases", response_model=PhaseOverviewResponse)
async def get_phases(
    code: str,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await lb_svc.get_phase_overview(code, db)
    except JudgingError as e:
        raise judging_error_to_api_error(e)


# =============================================================================
# Scoring (Admin Only)
# =============================================================================

@router.put("/{code}/teams/{team_id}/phases/{phase}/score", response_model=ScoreResponse)
@limiter.limit(settings.MUTATION_RATE_LIMIT)
async def put_score(
    request: Request,  # Required by slowapi
    code: str,
    team_id: str,
    phase: str,
    body: ScoreRequest,
    principal: Principal = Depends(require_hackathon_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Record a judge's score for a team in a phase.

    Re-scoring overwrites the previous value. ``phase`` is an index or a
    phase name.
    """
    try:
        # Score errors take precedence over phase lookup errors
        parse_score(body.score)
        phase_index = await _resolve_phase(code, phase, db)
        result = await score_svc.record_score(code, team_id, phase_index, body.score, db)
    except JudgingError as e:
        raise judging_error_to_api_error(e)

    logger.info(f"Principal {principal.id} scored {code}/{team_id}/phase {phase_index}")
    return ScoreResponse(**result)


# =============================================================================
# Submissions
# =============================================================================

@router.post(
    "/{code}/teams/{team_id}/phases/{phase}/submission",
    response_model=SubmissionResponse,
)
async def post_submission(
    code: str,
    team_id: str,
    phase: str,
    body: SubmissionRequest,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    """Submit or replace deliverables while the phase is active."""
    try:
        result = await sub_svc.submit_deliverables(code, team_id, phase, body.deliverables, db)
    except JudgingError as e:
        raise judging_error_to_api_error(e)
    return SubmissionResponse(**result)


# =============================================================================
# Leaderboard
# =============================================================================

@router.get("/{code}/leaderboard", response_model=LeaderboardResponse)
async def get_leaderboard(
    code: str,
    scope: Optional[str] = Query("overall", description='"overall", a phase index or a phase name'),
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await lb_svc.get_leaderboard(code, scope, db)
    except JudgingError as e:
        raise judging_error_to_api_error(e)


# =============================================================================
# Judging Sheet (Admin Only)
# =============================================================================

@router.get("/{code}/phases/{phase}/sheet", response_model=List[JudgingSheetRow])
async def get_judging_sheet(
    code: str,
    phase: str,
    principal: Principal = Depends(require_hackathon_admin),
    db: AsyncSession = Depends(get_db),
):
    """Per-team scored / awaiting score / no submission state for one phase."""
    try:
        return await lb_svc.get_judging_sheet(code, phase, db)
    except JudgingError as e:
        raise judging_error_to_api_error(e)


# =============================================================================
# Eliminations (Admin Only)
# =============================================================================

@router.post("/{code}/eliminations/preview", response_model=EliminationResponse)
async def preview_elimination(
    code: str,
    body: EliminationRequest,
    principal: Principal = Depends(require_hackathon_admin),
    db: AsyncSession = Depends(get_db),
):
    """Cutoff and affected teams for an elimination, without applying it."""
    try:
        result = await elim_svc.preview_elimination(code, body.scope, body.count, db)
    except JudgingError as e:
        raise judging_error_to_api_error(e)
    return EliminationResponse(code=code, dry_run=True, **result.to_dict())


@router.post("/{code}/eliminations", response_model=EliminationResponse)
@limiter.limit(settings.MUTATION_RATE_LIMIT)
async def post_elimination(
    request: Request,  # Required by slowapi
    code: str,
    body: EliminationRequest,
    principal: Principal = Depends(require_hackathon_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Eliminate the bottom ``count`` teams of ``scope``.

    Every team tied at the cutoff score is removed, so more than ``count``
    teams may go. At least one team always remains in the view.
    """
    try:
        result = await elim_svc.eliminate(
            code, body.scope, body.count, db, performed_by=principal.id,
        )
    except JudgingError as e:
        raise judging_error_to_api_error(e)
    return EliminationResponse(code=code, **result.to_dict())


@router.get("/{code}/eliminations", response_model=List[EliminationRecordResponse])
async def get_eliminations(
    code: str,
    principal: Principal = Depends(require_hackathon_admin),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await elim_svc.list_eliminations(code, db)
    except JudgingError as e:
        raise judging_error_to_api_error(e)
