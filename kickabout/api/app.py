"""FastAPI application factory"""

import asyncio
import logging
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from kickabout import __version__
from kickabout.shared.database import DatabaseManager
from kickabout.shared.errors import KickaboutError
from kickabout.shared.migrations.runner import MigrationRunner

from .core.config import Settings, get_settings
from .core.database import get_database_manager, init_database_manager
from .core.logging import setup_logging
from .routers import attendance_router, games_router, guests_router

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    "not_found": 404,
    "forbidden": 403,
    "conflict": 409,
    "invalid": 400,
}

_start_time: float = 0.0
_db_retry_task: asyncio.Task | None = None


async def _on_connected(db_manager: DatabaseManager, settings: Settings) -> None:
    if settings.run_migrations:
        await MigrationRunner(db_manager.pool).run_pending()


async def _db_retry_loop(db_manager: DatabaseManager, settings: Settings) -> None:
    """Keep retrying the DB connection after a failed startup."""
    delay = 5
    max_delay = 60
    while True:
        await asyncio.sleep(delay)
        if db_manager.is_connected:
            return
        try:
            await db_manager.connect()
            await _on_connected(db_manager, settings)
            logger.info("Database connected (background retry)")
            return
        except asyncio.CancelledError:
            return
        except Exception as e:
            delay = min(delay * 2, max_delay)
            logger.warning(f"DB background retry failed: {type(e).__name__}: {e}, next in {delay}s")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle startup and shutdown"""
    global _start_time, _db_retry_task
    _start_time = time.time()

    settings = get_settings()
    logger.info(f"Starting Kickabout API {__version__} ({settings.environment})")

    # Wait up to 30s for the pool before accepting requests, then retry in background
    db_manager = init_database_manager(settings)
    try:
        await asyncio.wait_for(db_manager.connect(), timeout=30)
        await _on_connected(db_manager, settings)
        logger.info("Database connected")
    except Exception as e:
        logger.error(
            f"DB connection failed during startup: {type(e).__name__}: {e}, retrying in background"
        )
        _db_retry_task = asyncio.create_task(_db_retry_loop(db_manager, settings))

    yield

    logger.info("Shutting down Kickabout API")
    if _db_retry_task:
        _db_retry_task.cancel()
    await db_manager.disconnect()


async def handle_domain_error(request: Request, exc: KickaboutError) -> JSONResponse:
    status_code = STATUS_BY_KIND.get(exc.kind, 500)
    logger.warning(f"{request.method} {request.url.path} -> {status_code}: {exc.message}")
    return JSONResponse(status_code=status_code, content={"detail": exc.message, "kind": exc.kind})


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"detail": jsonable_encoder(exc.errors()), "kind": "invalid"},
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure FastAPI application"""
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title="Kickabout API",
        description="Attendance, guests and capacity for a weekly pickup game",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(KickaboutError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)

    app.include_router(games_router.router)
    app.include_router(attendance_router.router)
    app.include_router(guests_router.router)

    @app.get("/health")
    async def health():
        """Liveness check (no DB dependency)"""
        return {"status": "healthy", "uptime_seconds": int(time.time() - _start_time)}

    @app.get("/status")
    async def status():
        """Readiness check including DB health"""
        db_manager = get_database_manager()
        db_ok = db_manager is not None and await db_manager.check_health()
        return {
            "service": "kickabout-api",
            "version": __version__,
            "uptime_seconds": int(time.time() - _start_time),
            "db_connected": db_ok,
            "environment": settings.environment,
        }

    @app.api_route("/ping", methods=["GET", "HEAD"], response_class=PlainTextResponse)
    async def ping():
        return "pong"

    logger.info("FastAPI application configured")
    return app
