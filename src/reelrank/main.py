"""FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from reelrank import __version__
from reelrank.api import api_router
from reelrank.config import get_settings
from reelrank.services.errors import AggregationError, ServiceError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan - runs on startup and shutdown."""
    # Startup
    logger.info("Starting %s v%s", settings.app_name, __version__)
    logger.info("Debug mode: %s", settings.debug)
    logger.info("Database: %s", settings.database_url.split("///")[-1])  # Hide path details
    logger.info(
        "Ranking defaults: top-rated min %s reviews, highest-rated min %s, trending window %s days",
        settings.top_rated_min_reviews,
        settings.highest_rated_min_reviews,
        settings.trending_window_days,
    )

    # Validate and log warnings
    warnings = settings.validate_runtime_config()
    if warnings:
        logger.warning("Configuration warnings:")
        for warning in warnings:
            logger.warning("  - %s", warning)
    else:
        logger.info("Configuration validation passed - no warnings")

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Application shutting down")


app = FastAPI(
    title=settings.app_name,
    version=__version__,
    debug=settings.debug,
    lifespan=lifespan,
)


@app.exception_handler(AggregationError)
async def aggregation_error_handler(request: Request, exc: AggregationError) -> JSONResponse:
    """Handle rating consistency failures; the request's writes are rolled back."""
    logger.error(
        "Rating consistency violation during %s %s: %s",
        request.method,
        request.url.path,
        exc,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": str(exc) or "Failed to update movie rating"},
    )


@app.exception_handler(ServiceError)
async def service_error_handler(_request: Request, exc: ServiceError) -> JSONResponse:
    """Handle domain errors (not found, invalid input, forbidden, duplicates) globally."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": str(exc)},
    )


# Include API router
app.include_router(api_router)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the API is running."""
    return {"status": "healthy", "version": __version__}
