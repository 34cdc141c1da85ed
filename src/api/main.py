"""FastAPI application entry point."""

import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from src.api.config import get_api_settings
from src.api.routes import experiments, health
from src.config import settings
from src.experimentation.ab_testing import ABTestingSystem
from src.experimentation.loader import load_experiments, register_experiments

api_settings = get_api_settings()


def configure_logging(level: str) -> None:
    """Route loguru output to stderr at the given level."""
    logger.remove()
    logger.add(sys.stderr, level=level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler.

    Loads experiment definitions on startup.
    """
    # Startup
    configure_logging(settings.log_level)
    logger.info("Starting up API server...")

    ab_testing = app.state.ab_testing

    experiments_file = settings.experiments_file
    if experiments_file is None:
        logger.info("No experiments file configured")
    elif not experiments_file.exists():
        logger.warning(f"Experiments file not found: {experiments_file}")
    else:
        count = register_experiments(ab_testing, load_experiments(experiments_file))
        logger.info(f"Registered {count} experiments")

    yield

    # Shutdown
    logger.info("Shutting down API server...")


def create_app(ab_testing: ABTestingSystem | None = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        ab_testing: Experiment registry to serve. Default: a new empty one.
    """
    app = FastAPI(
        title=api_settings.api_title,
        version=api_settings.api_version,
        description=api_settings.api_description,
        lifespan=lifespan,
    )
    app.state.ab_testing = ab_testing if ab_testing is not None else ABTestingSystem()

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=api_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(health.router)
    app.include_router(experiments.router)

    @app.get("/")
    async def root():
        """Root endpoint with API info."""
        return {
            "name": api_settings.api_title,
            "version": api_settings.api_version,
            "docs": "/docs",
            "health": "/health",
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.api.main:app",
        host=api_settings.host,
        port=api_settings.port,
        reload=api_settings.debug,
    )
