"""
Declarative base and common columns shared by all models.
"""
from sqlalchemy import Column, Integer, DateTime, func
from sqlalchemy.orm import declarative_base
from ezsplit.core.utils import now_local

Base = declarative_base()


class BaseModel(Base):
    """Abstract model with an integer primary key."""
    __abstract__ = True
    
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)


class TimestampMixin:
    """created_at / updated_at stamped in the fixed payment timezone offset."""
    created_at = Column(DateTime(timezone=True), server_default=func.now(), default=now_local, nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        default=now_local,
        onupdate=now_local,
        nullable=False
    )
