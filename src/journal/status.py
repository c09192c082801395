from __future__ import annotations
from collections.abc import Mapping
from typing import Any, Union

from src.journal.schema import EngineSnapshot, SystemStatus


def _trades(period: Any) -> int:
    if isinstance(period, Mapping):
        return int(period.get("trades") or 0)
    return int(getattr(period, "trades", 0) or 0)


def derive_status(snapshot: Union[EngineSnapshot, Mapping]) -> SystemStatus:
    """
    Weekly activity wins over monthly; the daily window never affects status,
    one active day is not an active trading week.
    """
    if isinstance(snapshot, Mapping):
        weekly, monthly = snapshot.get("weekly"), snapshot.get("monthly")
    else:
        weekly, monthly = snapshot.weekly, snapshot.monthly

    if _trades(weekly) > 0:
        return SystemStatus.ACTIVE
    if _trades(monthly) > 0:
        return SystemStatus.IDLE
    return SystemStatus.INACTIVE
