from __future__ import annotations
from collections.abc import Mapping
from datetime import datetime, tzinfo
from typing import Any, Dict, Iterable, List, Optional, Tuple
import logging

from src.journal.schema import EngineSnapshot, PeriodAggregate, PERIODS, TargetPair, TradeRecord
from src.timeframes import in_window, period_windows
from src.utils.exceptions import ValidationError
from src.utils.helpers import parse_date, parse_float

logger = logging.getLogger(__name__)


def winrate_pct(wins: int, losses: int) -> int:
    """Percent of decisive trades that won, rounded half-up; 0 with no decisive trades."""
    decisive = wins + losses
    if decisive == 0:
        return 0
    # integer form of floor(100 * wins / decisive + 0.5)
    return (200 * wins + decisive) // (2 * decisive)


def progress_ratio(profit: float, target: Optional[float], trades: int) -> Optional[float]:
    """
    profit / target for a positive target. A missing or non-positive target, or a
    window with no trades, has no measurable progress and yields None.
    """
    if target is None or target <= 0 or trades == 0:
        return None
    return profit / target


def coerce_record(item: Any, tz: Optional[tzinfo] = None) -> Optional[TradeRecord]:
    """Turn a TradeRecord or a {date, pnl} mapping into a TradeRecord, or None if invalid."""
    if isinstance(item, TradeRecord):
        raw_date, raw_pnl = item.date, item.pnl
    elif isinstance(item, Mapping):
        raw_date = item.get("date", item.get("tradeDate"))
        raw_pnl = item.get("pnl")
    else:
        return None

    d = parse_date(raw_date, tz)
    pnl = parse_float(raw_pnl)
    if d is None or pnl is None:
        return None
    return TradeRecord(date=d, pnl=pnl)


class _Accumulator:
    __slots__ = ("profit", "trades", "wins", "losses")

    def __init__(self) -> None:
        self.profit = 0.0
        self.trades = 0
        self.wins = 0
        self.losses = 0

    def add(self, pnl: float) -> None:
        self.profit += pnl
        self.trades += 1
        if pnl > 0:
            self.wins += 1
        elif pnl < 0:
            self.losses += 1

    def finish(self, target: Optional[float]) -> PeriodAggregate:
        return PeriodAggregate(
            profit=self.profit,
            trades=self.trades,
            wins=self.wins,
            losses=self.losses,
            winrate=winrate_pct(self.wins, self.losses),
            target=target,
            progress=progress_ratio(self.profit, target, self.trades),
        )


class StatsEngine:
    """
    Buckets journal trades into the daily, weekly and monthly windows around a
    reference instant and aggregates profit, counts and win rate per window.

    Windows are half-open on the local calendar (`tz`, or the process zone).
    Weeks start on Monday. Only weekly and monthly windows carry targets.
    """

    def __init__(self, tz: Optional[tzinfo] = None) -> None:
        self.tz = tz

    def normalize(self, trades: Iterable[Any]) -> Tuple[List[TradeRecord], int]:
        if trades is None or isinstance(trades, (str, bytes, Mapping)):
            raise ValidationError(f"trades must be a sequence of records, got {type(trades).__name__}")
        try:
            items = list(trades)
        except TypeError as e:
            raise ValidationError(f"trades must be a sequence of records, got {type(trades).__name__}") from e

        records: List[TradeRecord] = []
        skipped = 0
        for item in items:
            rec = coerce_record(item, self.tz)
            if rec is None:
                skipped += 1
                continue
            records.append(rec)
        return records, skipped

    def compute(
        self,
        trades: Iterable[Any],
        reference_instant: Optional[datetime] = None,
        targets: Optional[TargetPair] = None,
    ) -> EngineSnapshot:
        snapshot, _ = self.aggregate(trades, reference_instant, targets)
        return snapshot

    def aggregate(
        self,
        trades: Iterable[Any],
        reference_instant: Optional[datetime] = None,
        targets: Optional[TargetPair] = None,
    ) -> Tuple[EngineSnapshot, int]:
        """Like compute(), also returning how many invalid records were skipped."""
        ref = reference_instant or datetime.now().astimezone()
        targets = targets or TargetPair()
        records, skipped = self.normalize(trades)
        if skipped:
            logger.debug("Skipped %d invalid trade records", skipped)

        windows = period_windows(ref, self.tz)
        acc: Dict[str, _Accumulator] = {p: _Accumulator() for p in PERIODS}
        for rec in records:
            for period in PERIODS:
                if in_window(rec.date, windows[period]):
                    acc[period].add(rec.pnl)

        snapshot = EngineSnapshot(
            daily=acc["daily"].finish(None),
            weekly=acc["weekly"].finish(targets.weekly),
            monthly=acc["monthly"].finish(targets.monthly),
        )
        return snapshot, skipped


def compute_stats(
    trades: Iterable[Any],
    reference_instant: Optional[datetime] = None,
    targets: Optional[TargetPair] = None,
    tz: Optional[tzinfo] = None,
) -> EngineSnapshot:
    return StatsEngine(tz).compute(trades, reference_instant, targets)
