"""Main API router aggregation."""

from fastapi import APIRouter

from reelrank.api.auth import router as auth_router
from reelrank.api.movies import router as movies_router
from reelrank.api.reviews import router as reviews_router
from reelrank.api.watchlist import router as watchlist_router

# Main API router
api_router = APIRouter(prefix="/api")

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(movies_router)
api_router.include_router(reviews_router)
api_router.include_router(watchlist_router)
