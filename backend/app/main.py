"""Barbershop Admin API: main entry point."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from app.config import Settings, settings as default_settings
from app.core.database import build_engine, build_session_factory
from app.core.logging import configure_logging
from app.core.middleware import RequestLoggingMiddleware
from app.models import Base

logger = structlog.get_logger()

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown events."""
    # Startup
    settings: Settings = app.state.settings
    logger.info("Starting Barbershop Admin API", env=settings.app_env, timezone=settings.business_timezone)
    if settings.database_create_tables:
        async with app.state.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created")
    yield
    # Shutdown
    logger.info("Shutting down Barbershop Admin API")
    await app.state.engine.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build an application bound to its own settings and database engine."""
    settings = settings or default_settings
    configure_logging(settings)

    app = FastAPI(
        title="Barbershop Admin API",
        description="Revenue, expenses, customers and reports for a barbershop",
        version=VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
        redirect_slashes=False,
    )
    app.state.settings = settings
    app.state.engine = build_engine(settings)
    app.state.session_factory = build_session_factory(app.state.engine)

    # ── Middleware ─────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    # ── Health Check ──────────────────────────────────
    @app.get("/health", tags=["system"])
    async def health_check():
        """Liveness probe: always returns healthy if the process is running."""
        return {"status": "healthy", "version": VERSION}

    @app.get("/ready", tags=["system"])
    async def readiness_check(request: Request):
        """Readiness probe: checks DB connectivity."""
        checks = {"database": "unknown", "api": "ok"}
        try:
            async with request.app.state.session_factory() as session:
                await session.execute(text("SELECT 1"))
                checks["database"] = "ok"
        except Exception as e:
            logger.warning("Readiness check failed", error=str(e))
            checks["database"] = f"error: {e}"
            return {"status": "degraded", "checks": checks}

        return {"status": "ready", "checks": checks}

    # ── API Routes ────────────────────────────────────
    from app.api.v1 import catalog, customers, dashboard, expenses, reports, sales

    app.include_router(dashboard.router, prefix="/api/v1/dashboard", tags=["dashboard"])
    app.include_router(reports.router, prefix="/api/v1/reports", tags=["reports"])
    app.include_router(sales.router, prefix="/api/v1/sales", tags=["sales"])
    app.include_router(expenses.router, prefix="/api/v1/expenses", tags=["expenses"])
    app.include_router(customers.router, prefix="/api/v1/customers", tags=["customers"])
    app.include_router(catalog.router, prefix="/api/v1/catalog", tags=["catalog"])

    return app


app = create_app()
