from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Dict, List

from ..schema import TargetPair, TradeRecord


class TradeSource(ABC):
    @abstractmethod
    async def fetch_trades(self) -> List[TradeRecord]:
        """Every trade in the journal, all pages."""
        ...


class TargetSource(ABC):
    @abstractmethod
    async def fetch_targets(self) -> TargetPair:
        ...


class SnapshotSource(ABC):
    @abstractmethod
    async def fetch_snapshot(self) -> Dict[str, Any]:
        ...


class StaticTargetSource(TargetSource):
    """Fixed targets; the default pair means targets are not configured."""

    def __init__(self, targets: TargetPair = TargetPair()) -> None:
        self.targets = targets

    async def fetch_targets(self) -> TargetPair:
        return self.targets
