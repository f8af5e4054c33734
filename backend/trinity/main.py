"""
FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi

from trinity.api.v1 import health_metrics, measurements, users
from trinity.config import configure_logging
from trinity.db.database import init_db

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    """Create missing tables before serving requests."""
    init_db()
    logger.info("[STARTUP] Database tables ready")
    yield


app = FastAPI(
    lifespan=lifespan,
    title="Trinity Fat Loss API",
    description="Body composition tracking for Trinity Fat Loss trios",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)


def custom_openapi():
    """Custom OpenAPI schema with security schemes."""
    if app.openapi_schema:
        return app.openapi_schema

    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
    )

    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "Bearer": {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
            "description": "Token returned by /api/v1/users/anonymous.",
        }
    }

    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi

app.include_router(users.router, prefix="/api/v1/users", tags=["users"])
app.include_router(measurements.router, prefix="/api/v1", tags=["measurements"])
app.include_router(health_metrics.router, prefix="/api/v1", tags=["health-metrics"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "Trinity Fat Loss API"}


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "ok"}
