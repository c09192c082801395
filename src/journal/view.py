"""
UI adapter over engine output.

Reshapes an engine snapshot into the dashboard contract. Never recalculates
trades, profit or win rate; it only fills fields a producer left out.
"""
from __future__ import annotations
from collections.abc import Mapping
from typing import Any, Dict, Union

from src.journal.schema import EngineSnapshot, PERIODS, SystemStatus
from src.utils.exceptions import ValidationError


def _period_view(name: str, period: Any) -> Dict[str, Any]:
    if period is None:
        raise ValidationError(f"engine output is missing the {name} period")
    if hasattr(period, "to_dict"):
        period = period.to_dict()
    if not isinstance(period, Mapping):
        raise ValidationError(f"{name} period must be a mapping, got {type(period).__name__}")

    out = dict(period)
    if out.get("hasTrades") is None:
        out["hasTrades"] = (out.get("trades") or 0) > 0
    out.setdefault("target", None)
    out.setdefault("progress", None)
    return out


def to_view(snapshot: Union[EngineSnapshot, Mapping], status: SystemStatus) -> Dict[str, Any]:
    if isinstance(snapshot, EngineSnapshot):
        periods = {p: getattr(snapshot, p) for p in PERIODS}
    elif isinstance(snapshot, Mapping):
        periods = {p: snapshot.get(p) for p in PERIODS}
    else:
        raise ValidationError(f"snapshot must be a mapping, got {type(snapshot).__name__}")

    view: Dict[str, Any] = {"status": SystemStatus(status).value}
    for name, period in periods.items():
        view[name] = _period_view(name, period)
    return view
