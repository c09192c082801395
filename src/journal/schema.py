from __future__ import annotations
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class TradeRecord:
    date: date
    pnl: float


@dataclass(frozen=True)
class TargetPair:
    # None means "no target configured", which is not the same as a zero target
    weekly: Optional[float] = None
    monthly: Optional[float] = None


@dataclass
class PeriodAggregate:
    profit: float = 0.0
    trades: int = 0
    wins: int = 0
    losses: int = 0
    winrate: int = 0
    target: Optional[float] = None
    progress: Optional[float] = None

    @property
    def has_trades(self) -> bool:
        return self.trades > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "profit": self.profit,
            "trades": self.trades,
            "wins": self.wins,
            "losses": self.losses,
            "winrate": self.winrate,
            "hasTrades": self.has_trades,
            "target": self.target,
            "progress": self.progress,
        }


@dataclass
class EngineSnapshot:
    daily: PeriodAggregate
    weekly: PeriodAggregate
    monthly: PeriodAggregate

    def to_dict(self) -> Dict[str, Any]:
        return {
            "daily": self.daily.to_dict(),
            "weekly": self.weekly.to_dict(),
            "monthly": self.monthly.to_dict(),
        }


class SystemStatus(str, Enum):
    ACTIVE = "ACTIVE"
    IDLE = "IDLE"
    INACTIVE = "INACTIVE"


PERIODS = ("daily", "weekly", "monthly")
