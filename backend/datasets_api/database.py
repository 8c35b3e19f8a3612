"""Database access for the dataset event log."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, Sequence

from sqlalchemy import create_engine, insert
from sqlalchemy.engine import URL
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from .errors import StorageError
from .models import Base, DatasetLog, EventKind, utcnow
from .schemas import EventLogOut, LogEntryIn

logger = logging.getLogger(__name__)


class EventStore:
    """Owns the engine, its connection pool and the sessions drawn from it."""

    def __init__(self, url: str | URL) -> None:
        is_sqlite = str(url).startswith("sqlite")
        self.engine = create_engine(
            url,
            connect_args={"check_same_thread": False} if is_sqlite else {},
            pool_pre_ping=not is_sqlite,
            future=True,
        )
        self._session_factory = sessionmaker(
            bind=self.engine, autoflush=False, autocommit=False, future=True
        )

    def create_schema(self) -> None:
        Base.metadata.create_all(bind=self.engine)

    def dispose(self) -> None:
        self.engine.dispose()

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Provide a transactional scope for database operations."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def log_event(
        self, kind: EventKind, dataset_id: str, timestamp: datetime | None = None
    ) -> EventLogOut:
        entry = EventLogOut(
            event_type=kind, dataset_id=dataset_id, timestamp=timestamp or utcnow()
        )
        try:
            with self.session_scope() as session:
                session.add(
                    DatasetLog(
                        event_type=entry.event_type.value,
                        dataset_id=entry.dataset_id,
                        timestamp=entry.timestamp,
                    )
                )
        except SQLAlchemyError as exc:
            logger.exception("Database insert error for dataset %s", dataset_id)
            raise StorageError("Failed to insert log into database") from exc

        logger.info("Logged dataset %s: %s", kind.value, entry.dataset_id)
        return entry

    def bulk_insert(self, entries: Sequence[LogEntryIn]) -> int:
        if not entries:
            return 0

        rows = [
            {
                "event_type": entry.event_type.value,
                "dataset_id": entry.dataset_id,
                "timestamp": entry.timestamp,
            }
            for entry in entries
        ]
        try:
            with self.session_scope() as session:
                session.execute(insert(DatasetLog), rows)
        except SQLAlchemyError as exc:
            logger.exception("Bulk insert error for %d logs", len(rows))
            raise StorageError("Failed to insert logs into database") from exc

        logger.info("Bulk inserted %d dataset logs", len(rows))
        return len(rows)
