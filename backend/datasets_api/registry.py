"""HTTP client for the external dataset metadata registry."""
from __future__ import annotations

from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

ASPECT = "dcat-dataset-strings"
NOT_FOUND_STATUSES = frozenset({400, 404})


class EnrichmentLookupError(Exception):
    """Raised when metadata for a single dataset cannot be fetched."""

    def __init__(self, dataset_id: str, reason: str, status_code: Optional[int] = None) -> None:
        super().__init__(f"Metadata lookup for {dataset_id!r} failed: {reason}")
        self.dataset_id = dataset_id
        self.reason = reason
        self.status_code = status_code

    @property
    def not_found(self) -> bool:
        return self.status_code in NOT_FOUND_STATUSES


class RegistryClient:
    """Fetches the DCAT string aspect of registry records."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()

    def record_url(self, dataset_id: str) -> str:
        return f"{self._base_url}/records/{quote(dataset_id, safe='')}/aspects/{ASPECT}"

    def fetch_metadata(self, dataset_id: str) -> Dict[str, Any]:
        try:
            response = self._session.get(self.record_url(dataset_id), timeout=self._timeout)
            response.raise_for_status()
            metadata = response.json()
        except requests.HTTPError as exc:
            status_code = exc.response.status_code if exc.response is not None else None
            raise EnrichmentLookupError(dataset_id, str(exc), status_code) from exc
        except requests.RequestException as exc:
            raise EnrichmentLookupError(dataset_id, str(exc)) from exc
        except ValueError as exc:
            raise EnrichmentLookupError(dataset_id, "response is not valid JSON") from exc

        if not isinstance(metadata, dict):
            raise EnrichmentLookupError(dataset_id, "response is not a JSON object")
        return metadata

    def close(self) -> None:
        self._session.close()
