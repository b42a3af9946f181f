"""
FastAPI application entrypoint.

Lifespan:
  • On startup: verify DB connectivity, seed sync_status rows,
    start the sync scheduler (when SYNC_INTERVAL_MINUTES > 0).
  • On shutdown: stop the scheduler, dispose the engine cleanly.

Routers:
  • /sync — manual/cron sync trigger
  • /admin — operator views (sync health, row counts, usage)
  • /health — shallow liveness probe
  • /{resource} — the data gateway (mounted last, catch-all path)
"""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

from cricket_api.core.config import settings
from cricket_api.core.database import async_session_factory, engine
from cricket_api.core.errors import ApiError, UnexpectedFailure
from cricket_api.core.middleware import CORS_HEADERS, PermissiveCORSMiddleware
from cricket_api.routers.admin import router as admin_router
from cricket_api.routers.resources import router as resources_router
from cricket_api.routers.sync import router as sync_router
from cricket_api.services.scheduler import SyncScheduler
from cricket_api.services.sync_engine import run_scheduled_sync, seed_sync_status

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan ────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""

    # Startup — verify DB is reachable
    db_available = False
    try:
        async with engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("Database connection verified ✓")
        db_available = True
    except Exception:
        logger.warning(
            "Could not reach the database on startup. "
            "The app will start, but requests will fail until the DB is available."
        )

    # Startup — make sure every syncable type has a health row
    if db_available:
        try:
            async with async_session_factory() as session:
                await seed_sync_status(session)
            logger.info("Sync status rows seeded ✓")
        except Exception:
            logger.exception("Seeding sync_status failed (non-fatal)")

    # Startup — periodic sync
    scheduler: SyncScheduler | None = None
    if settings.SYNC_INTERVAL_MINUTES > 0:
        scheduler = SyncScheduler(
            run_scheduled_sync,
            interval_seconds=settings.SYNC_INTERVAL_MINUTES * 60,
            run_immediately=settings.SYNC_ON_STARTUP,
        )
        await scheduler.start()

    yield  # ← application runs here

    # Shutdown — stop syncing, then clean up connection pool
    if scheduler is not None:
        await scheduler.stop()
    await engine.dispose()
    logger.info("Database engine disposed ✓")


# ── App ─────────────────────────────────────────────────────
app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    description=(
        "Key-authenticated read access to cricket data, "
        "kept in sync with the upstream provider."
    ),
    lifespan=lifespan,
)

app.add_middleware(PermissiveCORSMiddleware)


# ── Error handling ──────────────────────────────────────────
@app.exception_handler(ApiError)
async def api_error_handler(_request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.payload())


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    error = UnexpectedFailure()
    # Rendered by ServerErrorMiddleware, outside PermissiveCORSMiddleware
    return JSONResponse(
        status_code=error.status_code,
        content=error.payload(),
        headers=CORS_HEADERS,
    )


# ── Health check ────────────────────────────────────────────
@app.get(
    "/health",
    tags=["System"],
    summary="Liveness probe",
)
async def health_check() -> dict[str, str]:
    """Shallow health check — confirms the process is alive."""
    return {"status": "healthy"}


# Mount routers — the gateway's catch-all path goes last
app.include_router(sync_router, prefix="/sync")
app.include_router(admin_router, prefix="/admin")
app.include_router(resources_router)
