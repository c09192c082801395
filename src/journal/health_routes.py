from __future__ import annotations
from fastapi import FastAPI, Request
from typing import Any
import time

from src.journal.service import ENGINE_CACHE_KEY, VIEW_CACHE_KEY
from src.journal.telemetry import telemetry


def _resolve_telemetry(request: Request):
    """Telemetry of the running service, falling back to the module-wide instance."""
    svc = getattr(request.app.state, "engine_service", None)
    return getattr(svc, "telemetry", None) or telemetry


def register(app: FastAPI) -> None:
    @app.get("/health")
    async def health(request: Request) -> Any:
        settings = request.app.state.settings
        started_at = getattr(request.app.state, "started_at", None)
        svc = request.app.state.engine_service
        cache_age = None
        if svc is not None:
            cache_age = {key: svc.cache.get_age(key) for key in (ENGINE_CACHE_KEY, VIEW_CACHE_KEY)}
        return {
            "status": "ok" if svc is not None else "starting",
            "version": settings.APP_VERSION,
            "targets_enabled": settings.targets_enabled,
            "cache_ttl_s": settings.cache_ttl,
            "cache_age_s": cache_age,
            "uptime_s": (time.time() - started_at) if started_at else None,
        }

    @app.get("/api/engine/metrics")
    async def engine_metrics(request: Request) -> Any:
        return _resolve_telemetry(request).get_snapshot()
