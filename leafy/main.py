from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from leafy.core.config import get_settings
from leafy.core.errors import NotFoundError, RowStoreError
from leafy.core.logging_config import configure_logging
from leafy.db.row_store import RowStore
from leafy.db.session import SessionLocal
from leafy.services.alert_scheduler import AlertSweepScheduler
from leafy.services.data_migrations import run_data_migrations

from leafy.routers.health import router as health_router
from leafy.routers.orders import router as orders_router
from leafy.routers.inventory import router as inventory_router
from leafy.routers.recipes import router as recipes_router
from leafy.routers.menu import router as menu_router
from leafy.routers.finance import router as finance_router
from leafy.routers.alerts import router as alerts_router
from leafy.routers.tasks import router as tasks_router
from leafy.routers.settings import router as settings_router

settings = get_settings()
configure_logging(settings.LOG_LEVEL, settings.LOG_FILE)

logger = logging.getLogger(__name__)


def run_startup_migrations() -> None:
    db = SessionLocal()
    try:
        applied = run_data_migrations(RowStore(db))
        if applied:
            logger.info(f"Startup data migrations applied: {', '.join(applied)}")
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    scheduler = AlertSweepScheduler(SessionLocal, settings.ALERT_SWEEP_INTERVAL_MINUTES)

    if settings.RUN_STARTUP_MIGRATIONS:
        try:
            await run_in_threadpool(run_startup_migrations)
        except Exception:
            logger.exception("Startup data migrations failed; continuing without them")

    if settings.ALERT_SWEEP_ENABLED:
        await run_in_threadpool(scheduler.sweep_once)
        scheduler.start()

    yield

    await scheduler.stop()


app = FastAPI(
    title=settings.APP_NAME,
    description="Leafy Life café back office API - Orders, inventory, recipes, finance, tasks and alerts.",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(RowStoreError)
async def row_store_exception_handler(request: Request, exc: RowStoreError):
    """A database read or write failed; nothing was partially stored."""
    logger.error(f"Row store error on {exc.table}: {exc.message}")
    return JSONResponse(
        status_code=503,
        content={
            "error": "store_error",
            "message": exc.message,
            "request_id": request.headers.get("X-Request-ID"),
        }
    )


@app.exception_handler(NotFoundError)
async def not_found_exception_handler(request: Request, exc: NotFoundError):
    return JSONResponse(
        status_code=404,
        content={
            "error": "not_found",
            "message": str(exc),
            "request_id": request.headers.get("X-Request-ID"),
        }
    )


# Global exception handler for unhandled errors
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected server errors with structured response."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_server_error",
            "message": "An unexpected error occurred. Please try again later.",
            "request_id": request.headers.get("X-Request-ID"),
        }
    )

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(orders_router, prefix="/api")
app.include_router(inventory_router, prefix="/api")
app.include_router(recipes_router, prefix="/api")
app.include_router(menu_router, prefix="/api")
app.include_router(finance_router, prefix="/api")
app.include_router(alerts_router, prefix="/api")
app.include_router(tasks_router, prefix="/api")
app.include_router(settings_router)


@app.get("/")
def read_root():
    return {
        "message": "Welcome to the Leafy Life API",
        "docs": "/docs",
        "health": "/health"
    }
