"""
API Router v1

Combines all route modules.
"""

from fastapi import APIRouter

from workout_tracker.api.v1.routes import sessions

api_router = APIRouter()

api_router.include_router(sessions.router, prefix="/sessions", tags=["Sessions"])
