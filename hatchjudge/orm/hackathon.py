"""
hatchjudge/orm/hackathon.py
Hackathon aggregate root and its ordered phases.

Phases are addressed by zero-based ``position``; ``name`` is a display key
unique within the hackathon.
"""
from sqlalchemy import (
    JSON, CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from hatchjudge.engine.models import HackathonSnapshot, PhaseSnapshot
from hatchjudge.orm.base import BaseModel


class Hackathon(BaseModel):
    __tablename__ = "hackathons"

    code = Column(String(64), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False, default="")

    # Principal ids allowed to score and eliminate
    admins = Column(JSON, nullable=False, default=list)

    # Bumped by every judging write; eliminations commit only against the version they ranked
    version = Column(Integer, nullable=False, default=0)

    phases = relationship(
        "HackathonPhase",
        back_populates="hackathon",
        order_by="HackathonPhase.position",
        cascade="all, delete-orphan",
    )
    registrations = relationship(
        "Registration",
        back_populates="hackathon",
        order_by="Registration.team_id",
        cascade="all, delete-orphan",
    )

    def to_snapshot(self) -> HackathonSnapshot:
        """Requires phases and registrations (with submissions) to be loaded."""
        return HackathonSnapshot(
            code=self.code,
            name=self.name or "",
            admins=list(self.admins or []),
            version=self.version or 0,
            phases=[phase.to_snapshot() for phase in self.phases],
            registrations=[registration.to_snapshot() for registration in self.registrations],
        )

    def __repr__(self):
        return f"<Hackathon(code='{self.code}', phases={len(self.phases or [])})>"


class HackathonPhase(BaseModel):
    __tablename__ = "hackathon_phases"

    hackathon_id = Column(
        Integer,
        ForeignKey("hackathons.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    position = Column(Integer, nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    deliverable_specs = Column(JSON, nullable=False, default=list)

    hackathon = relationship("Hackathon", back_populates="phases")

    __table_args__ = (
        UniqueConstraint("hackathon_id", "position"),
        UniqueConstraint("hackathon_id", "name"),
        CheckConstraint("start_time < end_time", name="window_ordered"),
        CheckConstraint("position >= 0", name="position_non_negative"),
    )

    def to_snapshot(self) -> PhaseSnapshot:
        return PhaseSnapshot(
            name=self.name,
            description=self.description or "",
            start_time=self.start_time,
            end_time=self.end_time,
            deliverable_specs=list(self.deliverable_specs or []),
        )
