"""Routers package - API endpoint routers."""
from .health import router as health_router
from .scores import router as scores_router
from .sandbox import router as sandbox_router

__all__ = [
    "health_router",
    "scores_router",
    "sandbox_router",
]
