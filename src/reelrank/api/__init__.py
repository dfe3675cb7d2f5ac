"""API routers."""

from reelrank.api.router import api_router

__all__ = ["api_router"]
