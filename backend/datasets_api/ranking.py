"""Popularity ranking over the dataset event log."""
from __future__ import annotations

import logging
from typing import List

from sqlalchemy import Select, case, func, select
from sqlalchemy.exc import SQLAlchemyError

from .database import EventStore
from .errors import StorageError
from .models import DatasetLog, EventKind
from .schemas import CandidateStat

logger = logging.getLogger(__name__)

VIEW_WEIGHT = 0.4
DOWNLOAD_WEIGHT = 0.6
CANDIDATE_LIMIT = 20

# 2:3 is the 0.4:0.6 ratio in integers, so ties stay ties on every backend.
_VIEW_RANK_UNITS = 2
_DOWNLOAD_RANK_UNITS = 3


def popularity_score(views: int, downloads: int) -> float:
    return VIEW_WEIGHT * views + DOWNLOAD_WEIGHT * downloads


def _count_of(kind: EventKind):
    return func.coalesce(func.sum(case((DatasetLog.event_type == kind.value, 1), else_=0)), 0)


def candidate_query(limit: int = CANDIDATE_LIMIT) -> Select:
    views = _count_of(EventKind.VIEW)
    downloads = _count_of(EventKind.DOWNLOAD)
    rank = views * _VIEW_RANK_UNITS + downloads * _DOWNLOAD_RANK_UNITS
    return (
        select(
            DatasetLog.dataset_id,
            views.label("views"),
            downloads.label("downloads"),
        )
        .group_by(DatasetLog.dataset_id)
        .order_by(rank.desc(), DatasetLog.dataset_id.asc())
        .limit(limit)
    )


def rank_candidates(store: EventStore, limit: int = CANDIDATE_LIMIT) -> List[CandidateStat]:
    """Return the most popular datasets, best first, at most ``limit`` of them."""
    try:
        with store.session_scope() as session:
            rows = session.execute(candidate_query(limit)).all()
    except SQLAlchemyError as exc:
        logger.exception("Error fetching dataset stats")
        raise StorageError("Internal Server Error") from exc

    candidates = []
    for row in rows:
        views = int(row.views or 0)
        downloads = int(row.downloads or 0)
        candidates.append(
            CandidateStat(
                dataset_id=row.dataset_id,
                views=views,
                downloads=downloads,
                popularity_score=popularity_score(views, downloads),
            )
        )
    return candidates
