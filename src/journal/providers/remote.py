from __future__ import annotations
from typing import Any, Dict, Optional
import logging

import httpx

from src.utils.exceptions import UpstreamFetchError
from .base import SnapshotSource

logger = logging.getLogger(__name__)


class RemoteSnapshotSource(SnapshotSource):
    """Reads the aggregator output from another deployment's /api/engine."""

    def __init__(self, base_url: str, timeout: float = 10.0, http_client: Optional[httpx.AsyncClient] = None) -> None:
        self.url = f"{base_url.rstrip('/')}/api/engine"
        self._client = http_client
        self._timeout = timeout

    async def fetch_snapshot(self) -> Dict[str, Any]:
        headers = {"Cache-Control": "no-store"}
        try:
            if self._client is not None:
                r = await self._client.get(self.url, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    r = await client.get(self.url, headers=headers)
        except httpx.HTTPError as e:
            raise UpstreamFetchError(f"Failed to fetch core engine: {e}") from e
        if r.status_code != 200:
            raise UpstreamFetchError(f"Failed to fetch core engine: {r.status_code}", status_code=r.status_code)
        try:
            data = r.json()
        except ValueError as e:
            raise UpstreamFetchError(f"Core engine returned invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise UpstreamFetchError("Core engine returned a non-object body")
        return data
