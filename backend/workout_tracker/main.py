"""
Workout Tracker API

FastAPI application for live workout session tracking.
"""

from contextlib import asynccontextmanager
import logging
import sys

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from workout_tracker import __version__
from workout_tracker.config import settings
from workout_tracker.api.v1.router import api_router
from workout_tracker.features.tracking import (
    InMemorySessionArchive,
    SessionTracker,
    StartPolicy,
    TrackingRunner,
)


# === Logging Setup ===
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout),
    ]
)
logger = logging.getLogger(__name__)


# === Lifespan ===
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    # Startup
    logger.info("Starting Workout Tracker API...")
    app.state.tracker = SessionTracker(policy=StartPolicy(settings.start_policy))
    app.state.runner = TrackingRunner(app.state.tracker)
    app.state.archive = InMemorySessionArchive()
    logger.info(f"Session tracker ready (start policy: {settings.start_policy})")

    yield

    # Shutdown
    await app.state.runner.stop()
    logger.info("Shutting down...")


# === App Creation ===
app = FastAPI(
    title="Workout Tracker API",
    description="Live workout tracking: distance, pace and calories from location fixes",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)


# === Middleware ===
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# === Routes ===
app.include_router(api_router, prefix="/api/v1")


# === Health Check ===
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}
