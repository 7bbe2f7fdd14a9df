"""FastAPI routers for API endpoints."""

from .expansion import router as expansion_router
from .health import router as health_router

__all__ = [
    "expansion_router",
    "health_router",
]
