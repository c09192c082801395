from __future__ import annotations
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
import asyncio
import logging

from src.utils.exceptions import UpstreamFetchError
from .cache import CacheEntry, ResultCache
from .providers.base import SnapshotSource, StaticTargetSource, TargetSource, TradeSource
from .schema import TargetPair, TradeRecord
from .stats_engine import StatsEngine
from .status import derive_status
from .telemetry import Telemetry, telemetry as default_telemetry
from .view import to_view

logger = logging.getLogger(__name__)

ENGINE_CACHE_KEY = "engine"
VIEW_CACHE_KEY = "engine-ui"


class EngineService:
    """
    Request path for both endpoints: cache lookup, concurrent upstream fetch,
    aggregation, status and view shaping. Only successful results are cached.
    """

    def __init__(
        self,
        trade_source: TradeSource,
        cache: ResultCache,
        target_source: Optional[TargetSource] = None,
        engine: Optional[StatsEngine] = None,
        snapshot_source: Optional[SnapshotSource] = None,
        telemetry: Optional[Telemetry] = None,
    ) -> None:
        self.trade_source = trade_source
        self.target_source = target_source or StaticTargetSource()
        self.cache = cache
        self.engine = engine or StatsEngine()
        self.snapshot_source = snapshot_source
        self.telemetry = telemetry or default_telemetry

    async def _fetch_targets(self) -> TargetPair:
        try:
            return await self.target_source.fetch_targets()
        except UpstreamFetchError as e:
            # targets only feed progress; trade aggregates still go out
            self.telemetry.record_failure("engine_target_failures_total", e)
            logger.warning("Target fetch failed, progress disabled for this run: %s", e)
            return TargetPair()

    async def _fetch_inputs(self) -> Tuple[List[TradeRecord], TargetPair]:
        try:
            trades, targets = await asyncio.gather(self.trade_source.fetch_trades(), self._fetch_targets())
        except UpstreamFetchError as e:
            self.telemetry.record_failure("engine_upstream_failures_total", e)
            raise
        return trades, targets

    async def compute_snapshot(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        trades, targets = await self._fetch_inputs()
        snapshot, skipped = self.engine.aggregate(trades, now, targets)
        skipped += getattr(self.trade_source, "last_skipped", 0)
        if skipped:
            self.telemetry.incr("engine_records_skipped_total", skipped)
        self.telemetry.mark_computed(len(trades))
        logger.info(
            "Computed snapshot from %d trades: daily=%d weekly=%d monthly=%d",
            len(trades), snapshot.daily.trades, snapshot.weekly.trades, snapshot.monthly.trades,
        )
        return snapshot.to_dict()

    async def _engine_entry(self, now: Optional[datetime]) -> CacheEntry:
        # uncounted: callers record the lookup they were asked for
        entry = self.cache.get(ENGINE_CACHE_KEY)
        if entry is None:
            entry = self.cache.put(ENGINE_CACHE_KEY, await self.compute_snapshot(now))
        return entry

    def _lookup(self, key: str) -> Optional[CacheEntry]:
        entry = self.cache.get(key)
        self.telemetry.incr("engine_cache_hits_total" if entry is not None else "engine_cache_misses_total")
        return entry

    async def snapshot(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        entry = self._lookup(ENGINE_CACHE_KEY)
        if entry is None:
            entry = await self._engine_entry(now)
        return entry.data

    async def view(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        entry = self._lookup(VIEW_CACHE_KEY)
        if entry is not None:
            return entry.data
        if self.snapshot_source is not None:
            snapshot = await self.snapshot_source.fetch_snapshot()
            source_ts = None
        else:
            source = await self._engine_entry(now)
            snapshot, source_ts = source.data, source.timestamp
        data = to_view(snapshot, derive_status(snapshot))
        # the view expires with the snapshot it was built from
        self.cache.put(VIEW_CACHE_KEY, data, timestamp=source_ts)
        return data
