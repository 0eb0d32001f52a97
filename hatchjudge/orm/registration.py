"""
hatchjudge/orm/registration.py
Team registrations and their per-phase submissions.

At most one submission row exists per (registration, phase_index); writers
upsert. ``score`` stays NULL until a judge records one.
"""
from sqlalchemy import (
    JSON, CheckConstraint, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint,
)
from sqlalchemy.orm import relationship

from hatchjudge.engine.models import SubmissionSnapshot, TeamSnapshot
from hatchjudge.orm.base import BaseModel


class Registration(BaseModel):
    __tablename__ = "registrations"

    hackathon_id = Column(
        Integer,
        ForeignKey("hackathons.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    team_id = Column(String(64), nullable=False, index=True)
    team_name = Column(String(255), nullable=True)
    leader = Column(JSON, nullable=True)
    members = Column(JSON, nullable=False, default=list)

    hackathon = relationship("Hackathon", back_populates="registrations")
    submissions = relationship(
        "Submission",
        back_populates="registration",
        order_by="Submission.phase_index",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        UniqueConstraint("hackathon_id", "team_id"),
    )

    def to_snapshot(self) -> TeamSnapshot:
        return TeamSnapshot(
            team_id=self.team_id,
            team_name=self.team_name,
            leader=self.leader,
            members=list(self.members or []),
            submissions=[submission.to_snapshot() for submission in self.submissions],
        )

    def __repr__(self):
        return f"<Registration(team_id='{self.team_id}', hackathon_id={self.hackathon_id})>"


class Submission(BaseModel):
    __tablename__ = "submissions"

    registration_id = Column(
        Integer,
        ForeignKey("registrations.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    phase_index = Column(Integer, nullable=False)
    submitted_at = Column(DateTime, nullable=True)
    deliverables = Column(JSON, nullable=False, default=dict)
    score = Column(Integer, nullable=True)

    registration = relationship("Registration", back_populates="submissions")

    __table_args__ = (
        UniqueConstraint("registration_id", "phase_index"),
        CheckConstraint("score IS NULL OR (score >= 0 AND score <= 100)", name="score_range"),
        CheckConstraint("phase_index >= 0", name="phase_index_non_negative"),
    )

    def to_snapshot(self) -> SubmissionSnapshot:
        return SubmissionSnapshot(
            phase_index=self.phase_index,
            deliverables=dict(self.deliverables or {}),
            submitted_at=self.submitted_at,
            score=self.score,
        )
