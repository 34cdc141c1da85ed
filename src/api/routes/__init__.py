"""API routes module.

Exports all route handlers for the FastAPI application.
"""

from src.api.routes.health import router as health_router
from src.api.routes.experiments import router as experiments_router

__all__ = [
    "health_router",
    "experiments_router",
]
