import asyncio
from contextlib import asynccontextmanager

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from fastapi import FastAPI, Request
from loguru import logger

from app.api.calendar import router as calendar_router
from app.api.downtime import router as downtime_router
from app.api.plans import router as plans_router
from app.api.reports import router as reports_router
from app.api.schedules import router as schedules_router
from app.api.work_orders import router as work_orders_router
from app.config.settings import settings
from app.core.logger import setup_logger
from app.db.models import Base
from app.db.session import get_engine, get_session
from app.maintenance.errors import MaintenanceError
from app.maintenance.repository import SqlMaintenanceRepository
from app.maintenance.service import MaintenanceScheduleService

# Initialize logger
setup_logger(level=settings.log_level, log_file=settings.log_file)

# Ensure database tables exist
logger.info("Ensuring database tables exist")
Base.metadata.create_all(bind=get_engine())
logger.info("Database tables verified")


def generate_orders_tick() -> None:
    """Materialize every due occurrence up to today in one transaction."""
    try:
        with get_session() as session:
            service = MaintenanceScheduleService(SqlMaintenanceRepository(session))
            service.initialize_schedules()
            results = service.generate_scheduled_orders()
        logger.info(f"[SCHEDULER] Auto-generation created {len(results)} work order(s)")
    except MaintenanceError as e:
        logger.error(f"[SCHEDULER] Auto-generation failed: {e}")


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Manage application lifespan - start the auto-generation scheduler when enabled.

    Note: FastAPI requires async for lifespan context manager,
    even if no await operations are used.
    """
    scheduler: BackgroundScheduler | None = None
    if settings.auto_generate_enabled:
        scheduler = BackgroundScheduler(timezone=settings.schedule_timezone)
        scheduler.add_job(
            generate_orders_tick,
            trigger=IntervalTrigger(hours=settings.auto_generate_interval_hours),
            id="scheduled_work_orders",
            name="Scheduled Work Order Generation",
            replace_existing=True,
        )
        scheduler.start()
        logger.info(
            f"[SCHEDULER] Started work order generation (runs every {settings.auto_generate_interval_hours} hours)"
        )
    else:
        logger.info("[SCHEDULER] Automatic work order generation disabled")

    await asyncio.sleep(0)
    yield

    if scheduler is not None:
        scheduler.shutdown()
        logger.info("[SCHEDULER] Stopped work order generation scheduler")


app = FastAPI(title="Maintenance Scheduler", lifespan=lifespan)

app.include_router(calendar_router)
app.include_router(schedules_router)
app.include_router(work_orders_router)
app.include_router(plans_router)
app.include_router(downtime_router)
app.include_router(reports_router)

logger.info("FastAPI application initialized")


@app.get("/health")
def health():
    return {"status": "ok"}


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all HTTP requests."""
    logger.debug(f"Request: {request.method} {request.url.path}")
    response = await call_next(request)
    logger.debug(f"Response: {response.status_code} for {request.method} {request.url.path}")
    return response
