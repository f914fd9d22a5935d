"""
FastAPI application entry point.
Assembles the app with routers, middleware, lifespan handlers, and exception handlers.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from backoffice.api.v1.router import api_router
from backoffice.core.config import settings
from backoffice.core.exceptions import setup_exception_handlers
from backoffice.core.logging import setup_logging
from backoffice.core.rate_limit import limiter
from backoffice.db import session as db_session
from backoffice.db.init_db import create_tables
from backoffice.deps.di_container import get_container, shutdown_container


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    Initializes logging, the database and the DI container.
    """
    # Startup
    setup_logging()

    await db_session.init_db()
    if settings.AUTO_CREATE_TABLES:
        await create_tables(db_session.engine)

    container = get_container()
    app.state.container = container

    yield

    # Shutdown
    await shutdown_container(container)
    await db_session.close_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="Timesheet approval and invoicing API",
        openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Rate limiting (applied per route on the portal)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Include API router
    app.include_router(api_router, prefix=settings.API_V1_PREFIX)

    # Global exception handlers
    setup_exception_handlers(app)

    return app


app = create_app()
