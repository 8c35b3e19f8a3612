"""FastAPI application entrypoint for the dataset statistics API."""
from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError as PydanticValidationError

from . import schemas
from .auth import require_secret
from .config import Settings
from .database import EventStore
from .enrichment import MetadataEnricher
from .errors import ValidationError, register_error_handlers
from .logging_setup import setup_logging
from .models import EventKind
from .ranking import rank_candidates
from .registry import RegistryClient

logger = logging.getLogger(__name__)


def get_store(request: Request) -> EventStore:
    return request.app.state.store


def get_enricher(request: Request) -> MetadataEnricher:
    return request.app.state.enricher


async def _read_json(request: Request) -> Any:
    body = await request.body()
    if not body.strip():
        return {}
    try:
        return await request.json()
    except ValueError as exc:
        raise ValidationError("Request body must be valid JSON") from exc


async def _log_event(kind: EventKind, request: Request, store: EventStore) -> Dict[str, Any]:
    payload = await _read_json(request)
    try:
        event_in = schemas.DatasetEventIn.model_validate(payload if isinstance(payload, dict) else {})
    except PydanticValidationError as exc:
        raise ValidationError("Dataset ID is required") from exc

    dataset_id = (event_in.dataset_id or "").strip()
    if not dataset_id:
        raise ValidationError("Dataset ID is required")

    entry = await asyncio.to_thread(store.log_event, kind, dataset_id)
    return {"success": True, "log": entry.model_dump(by_alias=True, mode="json")}


def _parse_logs(payload: Any) -> List[schemas.LogEntryIn]:
    logs = payload.get("logs") if isinstance(payload, dict) else None
    if not isinstance(logs, list):
        raise ValidationError("Logs must be an array")

    entries = []
    for index, raw in enumerate(logs):
        try:
            entries.append(schemas.LogEntryIn.model_validate(raw))
        except PydanticValidationError as exc:
            raise ValidationError(f"Invalid log entry at index {index}") from exc
    return entries


def create_app(
    settings: Optional[Settings] = None,
    *,
    store: Optional[EventStore] = None,
    registry: Optional[RegistryClient] = None,
) -> FastAPI:
    settings = settings or Settings()
    setup_logging(settings.log_level)

    store = store or EventStore(settings.sqlalchemy_url)
    registry = registry or RegistryClient(settings.registry_url, timeout=settings.registry_timeout)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store.create_schema()
        logger.info("%s ready", settings.app_name)
        yield
        registry.close()
        store.dispose()

    app = FastAPI(
        title=settings.app_name,
        description="Logs dataset views and downloads and ranks the most popular datasets.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.enricher = MetadataEnricher(registry)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    register_error_handlers(app)

    @app.post("/log-dataset-view", dependencies=[Depends(require_secret)])
    async def log_dataset_view(request: Request, store: EventStore = Depends(get_store)):
        return await _log_event(EventKind.VIEW, request, store)

    @app.post("/log-dataset-download", dependencies=[Depends(require_secret)])
    async def log_dataset_download(request: Request, store: EventStore = Depends(get_store)):
        return await _log_event(EventKind.DOWNLOAD, request, store)

    @app.post("/insert-json", dependencies=[Depends(require_secret)])
    async def insert_json(request: Request, store: EventStore = Depends(get_store)):
        entries = _parse_logs(await _read_json(request))
        inserted = await asyncio.to_thread(store.bulk_insert, entries)
        return {"success": True, "message": "Logs inserted successfully", "inserted": inserted}

    @app.get("/api/datasets", response_model=List[schemas.EnrichedDataset])
    def popular_datasets(
        store: EventStore = Depends(get_store),
        enricher: MetadataEnricher = Depends(get_enricher),
    ) -> List[schemas.EnrichedDataset]:
        candidates = rank_candidates(store)
        if not candidates:
            return []
        return enricher.enrich(candidates)

    return app
