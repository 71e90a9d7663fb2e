"""
Request dependencies.

Tracking objects live on app.state and are created by the app lifespan.
"""

from fastapi import Request

from workout_tracker.features.tracking import (
    SessionArchive,
    SessionTracker,
    TrackingRunner,
)


def get_tracker(request: Request) -> SessionTracker:
    return request.app.state.tracker


def get_runner(request: Request) -> TrackingRunner:
    return request.app.state.runner


def get_archive(request: Request) -> SessionArchive:
    return request.app.state.archive
