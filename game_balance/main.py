"""
FastAPI Application

Main entry point for the Game Balance Analytics API.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from game_balance.config import get_settings
from game_balance.config.logging import configure_logging
from game_balance.serving.api.middleware import (
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)
from game_balance.serving.api.routes import (
    analytics_router,
    health_router,
    tutorial_router,
)

settings = get_settings()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    configure_logging()
    logger.info("Starting Game Balance Analytics API", environment=settings.app_env)
    yield
    logger.info("Shutting down...")


app = FastAPI(
    title="Game Balance Analytics API",
    description="Stage difficulty, funnel and attrition analytics over game telemetry",
    version=settings.version,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)

app.include_router(health_router, prefix="/api/v1", tags=["Health"])
app.include_router(analytics_router, prefix="/api/v1/analytics", tags=["Analytics"])
app.include_router(tutorial_router, prefix="/api/v1/tutorial", tags=["Tutorial"])


@app.get("/api/v1/info")
async def api_info():
    """API information endpoint."""
    return {
        "name": "Game Balance Analytics API",
        "version": settings.version,
        "environment": settings.app_env,
        "documentation": "/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
