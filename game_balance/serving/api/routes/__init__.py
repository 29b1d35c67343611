"""
API Routes Module
"""
from .health import router as health_router
from .analytics import router as analytics_router
from .tutorial import router as tutorial_router

__all__ = [
    "health_router",
    "analytics_router",
    "tutorial_router",
]
