import pytest

from src.journal.schema import EngineSnapshot, PeriodAggregate, SystemStatus
from src.journal.status import derive_status
from src.journal.view import to_view
from src.utils.exceptions import ValidationError


def snapshot(daily=0, weekly=0, monthly=0):
    return EngineSnapshot(
        daily=PeriodAggregate(trades=daily),
        weekly=PeriodAggregate(trades=weekly),
        monthly=PeriodAggregate(trades=monthly),
    )


def test_status_idle_when_only_month_has_trades():
    assert derive_status(snapshot(weekly=0, monthly=5)) is SystemStatus.IDLE


def test_status_active_when_week_has_trades():
    assert derive_status(snapshot(weekly=3, monthly=0)) is SystemStatus.ACTIVE
    assert derive_status(snapshot(weekly=3, monthly=9)) is SystemStatus.ACTIVE


def test_status_inactive_when_nothing():
    assert derive_status(snapshot()) is SystemStatus.INACTIVE


def test_daily_never_changes_status():
    for weekly, monthly in [(0, 0), (0, 4), (2, 4)]:
        assert derive_status(snapshot(0, weekly, monthly)) == derive_status(snapshot(7, weekly, monthly))


def test_status_from_plain_mapping():
    data = {"daily": {"trades": 1}, "weekly": {"trades": 0}, "monthly": {"trades": 2}}
    assert derive_status(data) is SystemStatus.IDLE


def test_view_passes_aggregates_through():
    snap = EngineSnapshot(
        daily=PeriodAggregate(profit=10.0, trades=1, wins=1, winrate=100),
        weekly=PeriodAggregate(profit=60.0, trades=2, wins=1, losses=1, winrate=50, target=200.0, progress=0.3),
        monthly=PeriodAggregate(profit=80.0, trades=3, wins=2, losses=1, winrate=67),
    )
    view = to_view(snap, SystemStatus.ACTIVE)
    assert view["status"] == "ACTIVE"
    assert view["weekly"] == snap.weekly.to_dict()
    assert view["daily"]["hasTrades"] is True
    assert view["monthly"]["target"] is None
    assert view["monthly"]["progress"] is None


def test_view_fills_defaults_for_legacy_engine_output():
    legacy = {
        "daily": {"pl": 0, "trades": 0, "wins": 0, "losses": 0, "winrate": 0},
        "weekly": {"pl": 15.5, "trades": 2, "wins": 1, "losses": 0, "winrate": 100},
        "monthly": {"pl": 15.5, "trades": 2, "wins": 1, "losses": 0, "winrate": 100},
    }
    view = to_view(legacy, derive_status(legacy))
    assert view["status"] == "ACTIVE"
    assert view["daily"]["hasTrades"] is False
    assert view["weekly"]["hasTrades"] is True
    assert view["weekly"]["pl"] == 15.5
    assert "profit" not in view["weekly"]
    for period in ("daily", "weekly", "monthly"):
        assert view[period]["target"] is None
        assert view[period]["progress"] is None
    # input left untouched
    assert "hasTrades" not in legacy["weekly"]


def test_view_keeps_upstream_has_trades_flag():
    data = {
        "daily": {"trades": 0, "hasTrades": False},
        "weekly": {"trades": 0, "hasTrades": False},
        "monthly": {"trades": 1, "hasTrades": True, "target": 500, "progress": 0.1},
    }
    view = to_view(data, SystemStatus.IDLE)
    assert view["monthly"]["target"] == 500
    assert view["monthly"]["progress"] == 0.1


def test_view_rejects_missing_period():
    with pytest.raises(ValidationError):
        to_view({"daily": {}, "weekly": {}}, SystemStatus.INACTIVE)


def test_view_rejects_non_mapping():
    with pytest.raises(ValidationError):
        to_view([1, 2, 3], SystemStatus.INACTIVE)
