"""
FastAPI server for the trading journal stats engine.

GET /api/engine     raw daily/weekly/monthly aggregates
GET /api/engine-ui  the same aggregates plus derived system status, UI defaults
"""
from typing import Optional
import time

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from src.config.settings import Settings, get_settings, validate_settings
from src.journal.cache import ResultCache
from src.journal.health_routes import register as register_engine_routes
from src.journal.providers.base import StaticTargetSource
from src.journal.providers.notion import NotionClient, NotionTargetSource, NotionTradeSource
from src.journal.providers.remote import RemoteSnapshotSource
from src.journal.service import EngineService
from src.journal.stats_engine import StatsEngine
from src.utils.exceptions import UpstreamFetchError
from src.utils.logger import setup_logging, get_logger

logger = get_logger(__name__)


class ErrorResponse(BaseModel):
    error: str
    message: str


def _error(code: str, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content=ErrorResponse(error=code, message=str(exc)).model_dump())


def _journal_tz(settings: Settings):
    if not settings.JOURNAL_TIMEZONE:
        return None
    from zoneinfo import ZoneInfo

    return ZoneInfo(settings.JOURNAL_TIMEZONE)


def build_service(settings: Settings) -> EngineService:
    """Wire the Notion sources, cache and engine from validated settings."""
    tz = _journal_tz(settings)
    client = NotionClient(
        token=settings.AUTH_TOKEN,
        base_url=settings.NOTION_API_BASE,
        notion_version=settings.NOTION_VERSION,
        timeout=settings.NOTION_TIMEOUT_SECONDS,
    )
    trade_source = NotionTradeSource(
        client,
        settings.TRADES_DATABASE_ID,
        date_property=settings.TRADE_DATE_PROPERTY,
        pnl_property=settings.TRADE_PNL_PROPERTY,
        tz=tz,
    )
    if settings.targets_enabled:
        target_source = NotionTargetSource(
            client,
            settings.TARGETS_DATABASE_ID,
            type_property=settings.TARGET_TYPE_PROPERTY,
            value_property=settings.TARGET_VALUE_PROPERTY,
        )
    else:
        target_source = StaticTargetSource()
    snapshot_source = None
    if settings.ENGINE_BASE_URL:
        snapshot_source = RemoteSnapshotSource(settings.ENGINE_BASE_URL, timeout=settings.NOTION_TIMEOUT_SECONDS)
    return EngineService(
        trade_source=trade_source,
        target_source=target_source,
        cache=ResultCache(settings.cache_ttl),
        engine=StatsEngine(tz),
        snapshot_source=snapshot_source,
    )


def create_app(settings: Optional[Settings] = None, service: Optional[EngineService] = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title="Trading Journal Stats Engine",
        description="Daily / weekly / monthly performance from the trading journal",
        version=settings.APP_VERSION,
    )
    app.state.settings = settings
    app.state.engine_service = service
    app.state.started_at = None

    @app.on_event("startup")
    async def startup_event():
        # Missing TRADES_DATABASE_ID / AUTH_TOKEN aborts startup here.
        validate_settings(settings)
        if app.state.engine_service is None:
            app.state.engine_service = build_service(settings)
        app.state.started_at = time.time()
        logger.info(
            "Engine started: version=%s targets=%s cache_ttl=%ss remote_engine=%s",
            settings.APP_VERSION,
            "enabled" if settings.targets_enabled else "disabled",
            settings.cache_ttl,
            settings.ENGINE_BASE_URL or "no",
        )

    @app.on_event("shutdown")
    async def shutdown_event():
        svc = app.state.engine_service
        client = getattr(getattr(svc, "trade_source", None), "client", None)
        if isinstance(client, NotionClient):
            await client.aclose()
        logger.info("Engine stopped")

    @app.get("/api/engine")
    async def engine(request: Request):
        svc: EngineService = request.app.state.engine_service
        try:
            return await svc.snapshot()
        except UpstreamFetchError as e:
            logger.error("ENGINE UPSTREAM ERROR: %s", e)
            return _error("ENGINE_FAILURE", e)
        except Exception as e:
            logger.exception("ENGINE ERROR: %s", e)
            return _error("ENGINE_FAILURE", e)

    @app.get("/api/engine-ui")
    async def engine_ui(request: Request):
        svc: EngineService = request.app.state.engine_service
        try:
            return await svc.view()
        except UpstreamFetchError as e:
            logger.error("ENGINE UI UPSTREAM ERROR: %s", e)
            return _error("ENGINE_UI_FAILURE", e)
        except Exception as e:
            logger.exception("ENGINE UI ERROR: %s", e)
            return _error("ENGINE_UI_FAILURE", e)

    register_engine_routes(app)
    return app


app = create_app()
