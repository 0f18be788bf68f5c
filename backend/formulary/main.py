"""Main FastAPI application."""
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from formulary.api import categories, formulas, metrics, seed
from formulary.config import Settings, settings as default_settings
from formulary.database import Database
from formulary.seed import seed_database
from formulary.services.event_store import EventStore
from formulary.services.rate_limiter import RateLimiter
from formulary.services.ranking import RankingEngine
from formulary.utils.logger import logger


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the store and ranking components on startup, release them on shutdown."""
    settings = app.state.settings

    database = Database(settings.database_url, echo=False)
    # In production, use migrations
    database.create_all()
    if settings.seed_sample_data:
        seed_database(database)

    event_store = EventStore(database, RateLimiter())
    app.state.database = database
    app.state.event_store = event_store
    app.state.ranking_engine = RankingEngine(event_store)
    logger.info(f"Formulary API started ({settings.environment})")

    yield

    database.dispose()
    logger.info("Formulary API stopped")


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Create the FastAPI application."""
    app_settings = app_settings or default_settings

    app = FastAPI(
        title="Formulary API",
        description="Backend API for the Formulary spreadsheet formula catalog",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = app_settings

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(formulas.router)
    app.include_router(categories.router)
    app.include_router(metrics.router)
    app.include_router(seed.router)

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "message": "Formulary API",
            "version": "0.1.0",
            "docs": "/docs",
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()
