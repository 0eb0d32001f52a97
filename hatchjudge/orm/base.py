"""
hatchjudge/orm/base.py
Declarative base and shared columns for judging tables
"""
from datetime import datetime
from sqlalchemy import Column, DateTime, Integer, MetaData
from sqlalchemy.orm import declarative_base

# Named constraints keep check/unique violations identifiable in logs
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_N_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

Base = declarative_base(metadata=MetaData(naming_convention=NAMING_CONVENTION))


class BaseModel(Base):
    """
    Abstract base model with surrogate key and audit timestamps.
    """
    __abstract__ = True

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)

    created_at = Column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
        comment="Timestamp when record was created"
    )

    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
        comment="Timestamp when record was last updated"
    )
