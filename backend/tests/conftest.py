import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.datasets_api.config import Settings  # noqa: E402  pylint: disable=wrong-import-position
from backend.datasets_api.database import EventStore  # noqa: E402  pylint: disable=wrong-import-position
from backend.datasets_api.registry import EnrichmentLookupError  # noqa: E402  pylint: disable=wrong-import-position

SECRET = "test-secret"


class FakeRegistry:
    """In-process stand-in for the metadata registry.

    ``records`` maps dataset ids to metadata dicts; ids mapped to an int fail
    with that HTTP status, ids mapped to ``None`` fail like a network error,
    and unknown ids answer 404.
    """

    def __init__(self, records: Optional[Dict[str, Any]] = None) -> None:
        self.records = records or {}
        self.calls: List[str] = []
        self.closed = False

    def fetch_metadata(self, dataset_id: str) -> Dict[str, Any]:
        self.calls.append(dataset_id)
        record = self.records.get(dataset_id, 404)
        if record is None:
            raise EnrichmentLookupError(dataset_id, "connection refused")
        if isinstance(record, int):
            raise EnrichmentLookupError(dataset_id, f"{record} error", record)
        return record

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        secret_key=SECRET,
        database_url=f"sqlite:///{tmp_path / 'dataset_logs.db'}",
        cors_origins="http://localhost:6108",
        log_level="WARNING",
    )


@pytest.fixture
def store(settings):
    event_store = EventStore(settings.sqlalchemy_url)
    event_store.create_schema()
    yield event_store
    event_store.dispose()


@pytest.fixture
def registry():
    return FakeRegistry()


@pytest.fixture
def make_registry():
    return FakeRegistry
