"""Join ranked candidates with registry metadata."""
from __future__ import annotations

import logging
import re
from itertools import islice
from typing import Any, Iterable, Iterator, List, Mapping, Optional

from .registry import EnrichmentLookupError, RegistryClient
from .schemas import CandidateStat, EnrichedDataset

logger = logging.getLogger(__name__)

ENRICHMENT_QUOTA = 6

NO_TITLE = "Без названия"
UNKNOWN_PUBLISHER = "Неизвестный издатель"
NO_DESCRIPTION = "Нет описания."

# Registry descriptions carry either real line breaks or escaped "\n" pairs.
_LINE_BREAK = re.compile(r"\r?\n|\\n")
_PREVIEW_LINES = 2


def description_preview(description: Optional[str]) -> str:
    """Return the first two non-blank lines of ``description`` joined by a space."""
    if not description:
        return NO_DESCRIPTION
    lines = [line.strip() for line in _LINE_BREAK.split(description)]
    lines = [line for line in lines if line]
    return " ".join(lines[:_PREVIEW_LINES]) or NO_DESCRIPTION


def _text(value: Any) -> Optional[str]:
    return str(value) if value else None


def build_enriched(stat: CandidateStat, metadata: Mapping[str, Any]) -> EnrichedDataset:
    return EnrichedDataset(
        id=stat.dataset_id,
        views=stat.views,
        downloads=stat.downloads,
        title=_text(metadata.get("title")) or NO_TITLE,
        publisher=_text(metadata.get("publisher")) or UNKNOWN_PUBLISHER,
        description=description_preview(_text(metadata.get("description"))),
    )


class MetadataEnricher:
    """Enriches candidates in rank order until the quota is met.

    Lookups happen one at a time and only as the result list needs them, so
    no candidate past the last accepted one is ever fetched. A failed lookup
    drops that candidate; the next one in rank order may take its slot.
    """

    def __init__(self, client: RegistryClient, quota: int = ENRICHMENT_QUOTA) -> None:
        self._client = client
        self.quota = quota

    def _attempt(self, stat: CandidateStat) -> Optional[EnrichedDataset]:
        try:
            metadata = self._client.fetch_metadata(stat.dataset_id)
        except EnrichmentLookupError as exc:
            if exc.not_found:
                logger.warning("Dataset %s not found in registry. Skipping.", stat.dataset_id)
            else:
                logger.error(
                    "An error occurred while fetching metadata for %s: %s",
                    stat.dataset_id,
                    exc.reason,
                )
            return None
        return build_enriched(stat, metadata)

    def _attempts(self, candidates: Iterable[CandidateStat]) -> Iterator[EnrichedDataset]:
        for stat in candidates:
            enriched = self._attempt(stat)
            if enriched is not None:
                yield enriched

    def enrich(self, candidates: Iterable[CandidateStat]) -> List[EnrichedDataset]:
        return list(islice(self._attempts(candidates), self.quota))
