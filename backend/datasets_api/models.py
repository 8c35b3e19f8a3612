"""SQLAlchemy models for logged dataset events."""
from __future__ import annotations

import enum
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class EventKind(str, enum.Enum):
    VIEW = "view"
    DOWNLOAD = "download"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DatasetLog(Base):
    __tablename__ = "dataset_logs"

    id = Column(Integer, primary_key=True, index=True)
    event_type = Column(String(16), index=True, nullable=False)
    dataset_id = Column(Text, index=True, nullable=False)
    timestamp = Column(DateTime(timezone=True), default=utcnow, nullable=False)
