"""
ORM package
Importing this package registers every judging table on Base.metadata.
"""
from hatchjudge.orm.base import Base, BaseModel
from hatchjudge.orm.elimination import EliminationRecord
from hatchjudge.orm.hackathon import Hackathon, HackathonPhase
from hatchjudge.orm.registration import Registration, Submission

__all__ = [
    "Base",
    "BaseModel",
    "EliminationRecord",
    "Hackathon",
    "HackathonPhase",
    "Registration",
    "Submission",
]
