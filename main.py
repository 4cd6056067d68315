"""
DevEvents - event listing and booking API
Main application entry point
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
import uvicorn

from app.core.config import Settings, settings as default_settings
from app.core.db import ConnectionPool
from app.core.errors import DomainError, ErrorCode
from app.api import routes_bookings, routes_events, routes_public
from app.utils.responses import domain_error_response, error_response

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application; the connection pool is owned by its lifespan"""
    settings = settings or default_settings

    # Configure logging
    logging.basicConfig(level=settings.LOG_LEVEL.upper())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan management"""
        # Connects lazily on the first request that needs the database
        app.state.db = ConnectionPool(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
        yield
        await app.state.db.dispose()
        logger.info("Application shutdown")

    app = FastAPI(
        title="DevEvents",
        description="Browse developer events and book a spot",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.settings = settings

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(DomainError)
    async def handle_domain_error(request: Request, exc: DomainError):
        if exc.code is ErrorCode.CONFIGURATION_ERROR:
            logger.error("%s", exc)
        return domain_error_response(exc)

    @app.exception_handler(SQLAlchemyError)
    @app.exception_handler(OSError)
    async def handle_database_error(request: Request, exc: Exception):
        logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
        return error_response(
            message="Database unavailable",
            error_code=ErrorCode.DATABASE_UNAVAILABLE.value,
            status_code=503
        )

    # Include routers
    app.include_router(routes_public.router, tags=["public"])
    app.include_router(routes_events.router, prefix="/api/events", tags=["events"])
    app.include_router(routes_bookings.router, prefix="/api/bookings", tags=["bookings"])

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="127.0.0.1",
        port=8000,
        reload=True
    )
