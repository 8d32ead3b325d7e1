"""
Main FastAPI Application

Entry point for the multi-tenant notes API.
create_app() wires settings, database, middleware, error handlers and
routes. Settings and the Database are stored on app.state and reach the
handlers through dependencies, so each app (and each test) owns its own.

Run with:
    uvicorn notes_api.main:create_app --factory
or:
    python -m notes_api.main
"""
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
import time
from contextlib import asynccontextmanager

from notes_api import __version__
from notes_api.config import Settings, get_settings
from notes_api.database import Database
from notes_api.middleware.rate_limit import RateLimitMiddleware, create_redis_client
from notes_api.utils.logging import setup_logging, get_logger
from notes_api.api.endpoints import auth, notes, tenants

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    The database must be reachable at startup. If it is not, the error is
    re-raised and the server exits instead of serving degraded traffic.
    """
    settings: Settings = app.state.settings
    db: Database = app.state.db

    logger.info(f"Starting application in {settings.ENVIRONMENT} mode")

    try:
        db.ping()
    except SQLAlchemyError:
        logger.critical("Database connection failed at startup", exc_info=True)
        raise

    logger.info("Database connected successfully")

    if settings.CREATE_TABLES:
        db.create_all()

    logger.info("Application startup complete")

    yield

    logger.info("Shutting down application")
    db.dispose()
    logger.info("Application shutdown complete")


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """Build the application. Pass settings/database to override the environment."""
    settings = settings or get_settings()

    setup_logging(
        log_level=settings.LOG_LEVEL,
        json_format=(settings.ENVIRONMENT == "production")
    )

    app = FastAPI(
        title="Multi-Tenant Notes API",
        description="Tenant-isolated notes with JWT auth and free/pro subscription limits",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.db = database or Database(
        settings.DATABASE_URL,
        pool_size=settings.DATABASE_POOL_SIZE,
        max_overflow=settings.DATABASE_MAX_OVERFLOW,
        echo=settings.DEBUG,
    )

    _register_middleware(app, settings)
    _register_exception_handlers(app, settings)
    _register_routes(app)

    return app


def _register_middleware(app: FastAPI, settings: Settings) -> None:
    # Starlette wraps in reverse order: the last one added runs first.
    app.add_middleware(
        RateLimitMiddleware,
        redis_client=create_redis_client(settings.REDIS_URL),
        max_requests=settings.RATE_LIMIT_REQUESTS,
        window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS
    )

    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        """Add X-Process-Time header to track request duration."""
        start_time = time.time()
        response = await call_next(request)
        response.headers["X-Process-Time"] = str(time.time() - start_time)
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials="*" not in settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def _register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    """Every error leaves the API as a JSON {"message": ...} body."""

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=getattr(exc, "headers", None) or {}
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content={
                "message": "Invalid request body",
                "errors": [
                    {"loc": list(err.get("loc", ())), "msg": err.get("msg")}
                    for err in exc.errors()
                ]
            }
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        identity = getattr(request.state, "identity", None)
        logger.error(
            f"Database error: {type(exc).__name__}",
            exc_info=exc,
            extra={
                "path": request.url.path,
                "method": request.method,
                "tenant_id": identity.tenant_id if identity else None
            }
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Internal server error"}
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Catch-all exception handler.

        Full details are logged; the client only sees them when DEBUG is on.
        """
        logger.error(
            f"Unhandled exception: {type(exc).__name__}: {str(exc)}",
            exc_info=exc,
            extra={"path": request.url.path, "method": request.method}
        )

        if settings.DEBUG:
            return JSONResponse(
                status_code=500,
                content={"message": str(exc), "type": type(exc).__name__}
            )
        return JSONResponse(
            status_code=500,
            content={"message": "Internal server error"}
        )


def _register_routes(app: FastAPI) -> None:

    @app.get("/health", tags=["health"])
    async def health_check():
        """Liveness probe for load balancers. No authentication."""
        return {
            "status": "ok",
            "timestamp": datetime.utcnow().isoformat() + "Z",
        }

    app.include_router(auth.router, prefix="/api")
    app.include_router(tenants.router, prefix="/api")
    app.include_router(notes.router, prefix="/api")


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    setup_logging(log_level=settings.LOG_LEVEL)

    logger.info("=" * 80)
    logger.info("Multi-Tenant Notes API")
    logger.info("=" * 80)
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Debug: {settings.DEBUG}")
    logger.info("=" * 80)

    uvicorn.run(
        "notes_api.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
