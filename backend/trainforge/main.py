"""
TrainForge API

FastAPI application that turns uploaded training documents into draft
training modules with quizzes.

Run with:
    uvicorn trainforge.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from trainforge.config import settings
from trainforge.db.base import engine, init_db
from trainforge.logging_config import setup_logging
from trainforge.middleware.error_handling import setup_error_handling
from trainforge.routers import health, modules

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create missing tables on startup and release connections on shutdown."""
    await init_db()
    logger.info(f"{settings.APP_NAME} started")
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    setup_logging(settings.DEBUG)

    app = FastAPI(title=f"{settings.APP_NAME} API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    setup_error_handling(app, debug=settings.DEBUG)

    app.include_router(health.router)
    app.include_router(modules.router)

    return app


app = create_app()
