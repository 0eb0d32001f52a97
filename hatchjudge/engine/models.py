"""
In-memory snapshot types consumed and produced by the judging engine.

A HackathonSnapshot is the full aggregate read from the store: ordered
phases and the current registration set with nested submissions. The
engine never mutates a snapshot; services write through the store and
reload.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class PhaseStatus(str, Enum):
    UPCOMING = "upcoming"
    ACTIVE = "active"
    COMPLETED = "completed"


class SubmissionState(str, Enum):
    """Judging view state of a (team, phase) cell."""
    SCORED = "scored"
    AWAITING_SCORE = "awaiting_score"
    NO_SUBMISSION = "no_submission"


OVERALL = "overall"

# Either OVERALL or a zero-based phase index
LeaderboardScope = Union[str, int]


@dataclass
class PhaseSnapshot:
    name: str
    start_time: datetime
    end_time: datetime
    description: str = ""
    deliverable_specs: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class SubmissionSnapshot:
    phase_index: int
    deliverables: Dict[str, str] = field(default_factory=dict)
    submitted_at: Optional[datetime] = None
    score: Optional[int] = None


@dataclass
class TeamSnapshot:
    team_id: str
    team_name: Optional[str] = None
    leader: Optional[Dict[str, Any]] = None
    members: List[Dict[str, Any]] = field(default_factory=list)
    submissions: List[SubmissionSnapshot] = field(default_factory=list)

    @property
    def display_name(self) -> str:
        return self.team_name or self.team_id

    @property
    def member_count(self) -> int:
        return (1 if self.leader else 0) + len(self.members or [])


@dataclass
class HackathonSnapshot:
    code: str
    name: str = ""
    admins: List[str] = field(default_factory=list)
    phases: List[PhaseSnapshot] = field(default_factory=list)
    registrations: List[TeamSnapshot] = field(default_factory=list)
    version: int = 0

    def find_team(self, team_id: str) -> Optional[TeamSnapshot]:
        for team in self.registrations:
            if team.team_id == team_id:
                return team
        return None

    def is_admin(self, principal_id: str) -> bool:
        return principal_id in (self.admins or [])


@dataclass
class LeaderboardEntry:
    team_id: str
    team_name: str
    score: int
    member_count: int
    has_submission: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "team_id": self.team_id,
            "team_name": self.team_name,
            "score": self.score,
            "member_count": self.member_count,
            "has_submission": self.has_submission,
        }


@dataclass
class CutoffResult:
    scope: LeaderboardScope
    requested_count: int
    cutoff_score: int
    eliminated_team_ids: List[str]
    remaining_team_ids: List[str]

    @property
    def eliminated_count(self) -> int:
        return len(self.eliminated_team_ids)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scope": self.scope,
            "requested_count": self.requested_count,
            "cutoff_score": self.cutoff_score,
            "eliminated_team_ids": list(self.eliminated_team_ids),
            "eliminated_count": self.eliminated_count,
            "remaining_team_ids": list(self.remaining_team_ids),
        }
