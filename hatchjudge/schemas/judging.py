"""
Pydantic Schemas for the judging API

Request and response models for phases, scores, submissions,
leaderboards and eliminations.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field


# ============================================================================
# Phase Schemas
# ============================================================================

class PhaseResponse(BaseModel):
    index: int
    name: str
    description: str = ""
    start_time: datetime
    end_time: datetime
    status: str
    deliverable_specs: List[Dict[str, Any]] = Field(default_factory=list)


class PhaseOverviewResponse(BaseModel):
    code: str
    now: datetime
    active_phase_index: Optional[int] = None
    phases: List[PhaseResponse]


# ============================================================================
# Score Schemas
# ============================================================================

class ScoreRequest(BaseModel):
    """Raw judge input; integer parsing and range checks happen in the engine."""
    score: Any = Field(..., description="Integer score between 0 and 100")


class ScoreResponse(BaseModel):
    success: bool = True
    code: str
    team_id: str
    phase_index: int
    score: int
    previous_score: Optional[int] = None
    created: bool


# ============================================================================
# Submission Schemas
# ============================================================================

class SubmissionRequest(BaseModel):
    deliverables: Dict[str, Any] = Field(..., description="Deliverable type to value, e.g. github -> URL")


class SubmissionResponse(BaseModel):
    success: bool = True
    code: str
    team_id: str
    phase_index: int
    deliverables: Dict[str, str]
    submitted_at: datetime
    created: bool


# ============================================================================
# Leaderboard Schemas
# ============================================================================

class LeaderboardEntryResponse(BaseModel):
    rank: int
    team_id: str
    team_name: str
    score: int
    member_count: int
    has_submission: bool


class JudgingSheetRow(BaseModel):
    team_id: str
    team_name: str
    phase_index: int
    state: str
    score: Optional[int] = None
    deliverables: Dict[str, str] = Field(default_factory=dict)
    submitted_at: Optional[datetime] = None


class LeaderboardResponse(BaseModel):
    code: str
    scope: Union[int, str]
    phase_name: Optional[str] = None
    team_count: int
    pending_grades: int
    entries: List[LeaderboardEntryResponse]


# ============================================================================
# Elimination Schemas
# ============================================================================

class EliminationRequest(BaseModel):
    scope: Union[int, str] = Field("overall", description='"overall", a phase index or a phase name')
    count: Any = Field(..., description="Number of lowest-ranked teams to eliminate")


class EliminationResponse(BaseModel):
    success: bool = True
    code: str
    dry_run: bool = False
    scope: Union[int, str]
    requested_count: int
    cutoff_score: int
    eliminated_count: int
    eliminated_team_ids: List[str]
    remaining_team_ids: List[str]


class EliminationRecordResponse(BaseModel):
    id: int
    hackathon_code: str
    scope: str
    requested_count: int
    cutoff_score: int
    eliminated_team_ids: List[str]
    performed_by: Optional[str] = None
    created_at: Optional[str] = None
