from pathlib import Path
from contextlib import asynccontextmanager
import asyncio
from typing import List

from alembic import command
from alembic.config import Config
from fastapi import FastAPI

from transit_tracker.api.routes import health, pull, stats, vehicles
from transit_tracker.core.config import settings
from transit_tracker.core.db import session_scope
from transit_tracker.core.logging import get_logger
from transit_tracker.services.pull_service import PULL_LOCK, PullService
from transit_tracker.services.retention import RetentionService


log = get_logger("transit_tracker")

# Background task handles
_tasks: List[asyncio.Task] = []


def run_migrations() -> None:
    """Execute Alembic migrations programmatically on startup."""
    project_root = Path(__file__).resolve().parent.parent
    alembic_cfg = Config(str(project_root / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(project_root / "alembic"))
    alembic_cfg.set_main_option("sqlalchemy.url", settings.DATABASE_URL)
    log.info("Running Alembic migrations to head")
    command.upgrade(alembic_cfg, "head")
    log.info("Alembic migrations applied")


async def run_pull_pipeline() -> None:
    """Run one feed pull unless the previous one is still in flight."""
    if PULL_LOCK.locked():
        log.warning("Previous feed pull still running; skipping this interval")
        return

    async with PULL_LOCK:
        with session_scope() as db:
            try:
                result = await PullService(db).run()
                if result["success"]:
                    log.info(
                        f"Pull finished: parsed={result['records_parsed']} skipped={result['records_skipped']} "
                        f"upserted={result['records_upserted']} deactivated={result['records_deactivated']}"
                    )
                else:
                    log.error(f"Pull failed: {result['error']}")
            except Exception as exc:
                # The next scheduled pull supersedes a failed one.
                log.exception(f"Error in scheduled data fetch: {exc}")


async def scheduled_pull_task() -> None:
    """Background task that pulls the feed at the configured interval."""
    interval = settings.PULL_INTERVAL_SECONDS
    log.info(f"Parser started. Fetching data every {interval} seconds")

    # Run immediately on startup
    await run_pull_pipeline()

    while True:
        try:
            await asyncio.sleep(interval)
            await run_pull_pipeline()
        except asyncio.CancelledError:
            log.info("Scheduled pull task cancelled")
            break
        except Exception as exc:
            log.exception(f"Scheduled pull task error: {exc}")


async def scheduled_retention_task() -> None:
    """Background task that removes long-inactive vehicles once a day."""
    interval = settings.RETENTION_INTERVAL_SECONDS
    log.info(f"Retention task started (interval: {interval}s, window: {settings.RETENTION_DAYS} days)")

    while True:
        try:
            await asyncio.sleep(interval)
            with session_scope() as db:
                RetentionService(db).purge_inactive(settings.RETENTION_DAYS)
        except asyncio.CancelledError:
            log.info("Retention task cancelled")
            break
        except Exception as exc:
            log.exception(f"Retention task error: {exc}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info(f"Starting application in {settings.ENV.upper()} mode")

    try:
        run_migrations()
    except Exception:
        log.exception("Failed to apply migrations on startup")
        raise

    if settings.PULL_ENABLED:
        if not settings.feed_url:
            log.error("FEED_URL is not configured; scheduled pulls disabled")
        else:
            _tasks.append(asyncio.create_task(scheduled_pull_task()))
    else:
        log.info("Scheduled pulls are disabled (PULL_ENABLED=false)")

    if settings.RETENTION_ENABLED:
        _tasks.append(asyncio.create_task(scheduled_retention_task()))

    yield

    log.info("Shutting down background tasks...")
    for task in _tasks:
        task.cancel()
    for task in _tasks:
        try:
            await task
        except asyncio.CancelledError:
            pass
    _tasks.clear()

    log.info("Application shutdown complete")


app = FastAPI(
    title="Transit Tracker",
    description="GTFS-Realtime vehicle position ingestion and active-vehicle tracking",
    version="1.0.0",
    lifespan=lifespan,
    # Disable docs in production
    docs_url="/docs" if settings.docs_enabled else None,
    redoc_url="/redoc" if settings.docs_enabled else None,
    openapi_url="/openapi.json" if settings.docs_enabled else None,
    debug=settings.debug_enabled,
)


app.include_router(health.router)
app.include_router(pull.router)
app.include_router(stats.router)
app.include_router(vehicles.router)
