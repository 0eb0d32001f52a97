"""
hatchjudge/orm/elimination.py
Append-only audit trail of applied eliminations.

Written in the same transaction as the registration removals, so a record
exists if and only if the removal was committed.
"""
from sqlalchemy import JSON, Column, Integer, String

from hatchjudge.orm.base import BaseModel


class EliminationRecord(BaseModel):
    __tablename__ = "elimination_records"

    hackathon_code = Column(String(64), nullable=False, index=True)

    # "overall" or the phase index as a string
    scope = Column(String(32), nullable=False)
    requested_count = Column(Integer, nullable=False)
    cutoff_score = Column(Integer, nullable=False)
    eliminated_team_ids = Column(JSON, nullable=False, default=list)
    performed_by = Column(String(255), nullable=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "hackathon_code": self.hackathon_code,
            "scope": self.scope,
            "requested_count": self.requested_count,
            "cutoff_score": self.cutoff_score,
            "eliminated_team_ids": list(self.eliminated_team_ids or []),
            "performed_by": self.performed_by,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
