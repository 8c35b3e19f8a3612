"""Pydantic models for request and response bodies."""
from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models import EventKind

# Calendar date first; pydantic would otherwise also accept Unix epochs.
_ISO_DATE_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}")


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class DatasetEventIn(_CamelModel):
    dataset_id: Optional[str] = Field(None, alias="datasetId")

    @field_validator("dataset_id", mode="before")
    @classmethod
    def numbers_as_text(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class LogEntryIn(_CamelModel):
    event_type: EventKind = Field(..., alias="eventType")
    dataset_id: str = Field(..., alias="datasetId", min_length=1)
    timestamp: datetime

    @field_validator("timestamp", mode="before")
    @classmethod
    def require_iso_string(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return value
        if not isinstance(value, str) or not _ISO_DATE_PREFIX.match(value.strip()):
            raise ValueError("timestamp must be an ISO-8601 string")
        return value.strip()


class EventLogOut(_CamelModel):
    event_type: EventKind = Field(..., alias="eventType")
    dataset_id: str = Field(..., alias="datasetId")
    timestamp: datetime


class CandidateStat(BaseModel):
    dataset_id: str
    views: int = Field(..., ge=0)
    downloads: int = Field(..., ge=0)
    popularity_score: float


class EnrichedDataset(BaseModel):
    id: str
    views: int
    downloads: int
    title: str
    publisher: str
    description: str
