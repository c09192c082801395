from __future__ import annotations
from datetime import tzinfo
from typing import Any, Dict, List, Optional
import logging

import httpx

from src.utils.exceptions import UpstreamFetchError
from src.utils.helpers import parse_date
from ..schema import TargetPair, TradeRecord
from .base import TargetSource, TradeSource
from .properties import extract_date_start, extract_number, extract_text, page_properties

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.notion.com/v1"
DEFAULT_NOTION_VERSION = "2022-06-28"


class NotionClient:
    """
    Minimal async client for Notion database queries.
    Pages are fetched one after another following `next_cursor`; a failed page
    fails the whole query. No retries.
    """

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_API_BASE,
        notion_version: str = DEFAULT_NOTION_VERSION,
        timeout: float = 10.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Notion-Version": notion_version,
            "Content-Type": "application/json",
        }
        self._client = http_client
        self._owns_client = http_client is None
        self._timeout = timeout

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                limits=httpx.Limits(max_keepalive_connections=5, max_connections=10),
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def query_database(self, database_id: str, page_size: int = 100) -> List[Dict[str, Any]]:
        url = f"{self.base_url}/databases/{database_id}/query"
        client = self._get_client()
        results: List[Dict[str, Any]] = []
        cursor: Optional[str] = None
        pages = 0
        while True:
            body: Dict[str, Any] = {"page_size": page_size}
            if cursor:
                body["start_cursor"] = cursor
            try:
                r = await client.post(url, headers=self._headers, json=body)
            except httpx.HTTPError as e:
                raise UpstreamFetchError(f"Notion API request failed: {e}") from e
            if r.status_code < 200 or r.status_code >= 300:
                raise UpstreamFetchError(
                    f"Notion API error: {r.status_code} {r.text}", status_code=r.status_code
                )
            try:
                data = r.json()
            except ValueError as e:
                raise UpstreamFetchError(f"Notion API returned invalid JSON: {e}") from e
            if not isinstance(data, dict):
                raise UpstreamFetchError(f"Notion API returned a {type(data).__name__}, expected an object")
            page_results = data.get("results")
            if page_results is None:
                page_results = []
            if not isinstance(page_results, list):
                raise UpstreamFetchError(f"Notion API results is a {type(page_results).__name__}, expected a list")

            results.extend(page_results)
            pages += 1
            cursor = data.get("next_cursor") if data.get("has_more") else None
            if not cursor:
                break
        logger.debug("Queried database %s: %d rows over %d pages", database_id, len(results), pages)
        return results


class NotionTradeSource(TradeSource):
    def __init__(
        self,
        client: NotionClient,
        database_id: str,
        date_property: str = "Date",
        pnl_property: str = "Net P&L",
        tz: Optional[tzinfo] = None,
    ) -> None:
        self.client = client
        self.database_id = database_id
        self.date_property = date_property
        self.pnl_property = pnl_property
        self.tz = tz
        self.last_skipped = 0

    def to_record(self, page: Dict[str, Any]) -> Optional[TradeRecord]:
        props = page_properties(page)
        d = parse_date(extract_date_start(props.get(self.date_property)), self.tz)
        pnl = extract_number(props.get(self.pnl_property))
        if d is None or pnl is None:
            return None
        return TradeRecord(date=d, pnl=pnl)

    async def fetch_trades(self) -> List[TradeRecord]:
        pages = await self.client.query_database(self.database_id)
        records: List[TradeRecord] = []
        skipped = 0
        for page in pages:
            rec = self.to_record(page)
            if rec is None:
                skipped += 1
                continue
            records.append(rec)
        self.last_skipped = skipped
        if skipped:
            logger.warning(
                "Dropped %d of %d journal pages with missing %r or non-numeric %r",
                skipped, len(pages), self.date_property, self.pnl_property,
            )
        return records


class NotionTargetSource(TargetSource):
    def __init__(
        self,
        client: NotionClient,
        database_id: str,
        type_property: str = "Type",
        value_property: str = "Target",
    ) -> None:
        self.client = client
        self.database_id = database_id
        self.type_property = type_property
        self.value_property = value_property

    async def fetch_targets(self) -> TargetPair:
        pages = await self.client.query_database(self.database_id)
        found: Dict[str, float] = {}
        for page in pages:
            props = page_properties(page)
            kind = extract_text(props.get(self.type_property))
            value = extract_number(props.get(self.value_property))
            if kind is None or value is None:
                continue
            key = kind.lower()
            if key not in ("weekly", "monthly"):
                continue
            if key in found:
                logger.warning("Ignoring duplicate %s target %s (keeping %s)", kind, value, found[key])
                continue
            found[key] = value
        return TargetPair(weekly=found.get("weekly"), monthly=found.get("monthly"))
