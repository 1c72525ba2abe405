"""
FastAPI application for the salon booking API

Availability, reservations, holidays and working hours
"""
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute
from contextlib import asynccontextmanager
import logging

from salonbook.config.settings import get_settings
from salonbook.core.middleware import correlation_id_middleware, request_logging_middleware
from salonbook.core.monitoring import health_router
from salonbook.api.v1.router import api_v1_router
from salonbook.utils.my_logging import setup_logging

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    setup_logging(verbose=settings.DEBUG)
    routes = sorted(
        (route.path, ",".join(sorted(route.methods)))
        for route in app.routes
        if isinstance(route, APIRoute)
    )
    logger.info(f"🚀 {settings.APP_NAME} starting up with {len(routes)} routes")
    for path, methods in routes:
        logger.debug(f"  {methods:12} {path}")

    yield

    # Shutdown
    logger.info(f"🛑 {settings.APP_NAME} shutting down...")


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""

    app = FastAPI(
        title=settings.APP_NAME,
        description="Salon appointment booking: availability, reservations and schedules",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )

    # Registered last so it runs first and the logger sees the correlation id
    app.middleware("http")(request_logging_middleware)
    app.middleware("http")(correlation_id_middleware)

    # Include routers
    app.include_router(health_router, prefix="/health", tags=["monitoring"])
    app.include_router(api_v1_router, prefix="/api/v1")

    @app.get("/")
    async def root():
        return {
            "service": settings.APP_NAME,
            "version": "0.1.0",
            "status": "running",
            "endpoints": {
                "api": "/api/v1/",
                "health": "/health",
                "docs": "/docs" if settings.DEBUG else "disabled"
            }
        }

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "salonbook.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info"
    )
