"""Main application entry point."""

import logging
import os
import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from .config import get_settings
from .database import check_database_health, dispose_engine, list_tables
from .errors import RecipeAppError
from .routes import account_router, pantry_router, preferences_router, recipes_router

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

SERVICE_NAME = "instant-recipe"


def validate_environment():
    """Validate all required environment variables on startup."""
    try:
        settings = get_settings()
        logger.info("Environment variables validated successfully")
        return settings
    except ValidationError as e:
        logger.error("ERROR: Missing or invalid environment variables:")
        logger.error(str(e))
        sys.exit(1)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown."""
    logger.info("Starting Instant Recipe...")

    db_url = os.environ.get("DATABASE_URL", "")
    logger.info(f"=== DATABASE_URL set: {'YES' if db_url else 'NO'} ===")

    validate_environment()

    tables = list_tables()
    logger.info(f"=== Tables in database: {tables} ===")
    if "daily_recipe_generations" not in tables:
        logger.warning("daily_recipe_generations is missing; generation will not be rate limited")

    logger.info("Instant Recipe started successfully")

    yield

    logger.info("Shutting down Instant Recipe...")
    dispose_engine()
    logger.info("Instant Recipe shutdown complete")


app = FastAPI(
    title="Instant Recipe",
    description="Preference-aware recipe generation",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(recipes_router)
app.include_router(preferences_router)
app.include_router(pantry_router)
app.include_router(account_router)


# =============================================================================
# Error handlers
# =============================================================================


@app.exception_handler(RecipeAppError)
async def recipe_app_error_handler(request: Request, exc: RecipeAppError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_response_body())


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# =============================================================================
# Service endpoints
# =============================================================================


@app.get("/health")
async def health_check():
    """Health check endpoint.

    Verifies database connection and returns status.
    """
    db_healthy = check_database_health()
    body = {
        "status": "ok" if db_healthy else "error",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": SERVICE_NAME,
        "database": "connected" if db_healthy else "disconnected",
    }
    return JSONResponse(status_code=200 if db_healthy else 503, content=body)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Instant Recipe",
        "status": "running",
        "version": "1.0.0",
    }
