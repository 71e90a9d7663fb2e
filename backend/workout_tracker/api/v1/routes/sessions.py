"""
Workout Session Routes

Endpoints for starting, feeding and finishing the tracked session.
Idle-state calls return null instead of an error.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from workout_tracker.api.deps import get_archive, get_runner, get_tracker
from workout_tracker.config import settings
from workout_tracker.features.tracking import (
    FixIn,
    FixRequest,
    GPXReplaySource,
    ReplayStarted,
    SessionArchive,
    SessionAlreadyActiveError,
    SessionOut,
    SessionTracker,
    StartPolicy,
    StartSessionRequest,
    TrackingRunner,
)

logger = logging.getLogger(__name__)

router = APIRouter()

MAX_GPX_BYTES = 20 * 1024 * 1024  # 20MB


@router.post("", response_model=SessionOut)
async def start_session(
    body: StartSessionRequest,
    tracker: SessionTracker = Depends(get_tracker),
    runner: TrackingRunner = Depends(get_runner),
):
    """Start tracking a new workout session."""
    if tracker.is_active and tracker.policy is StartPolicy.REPLACE:
        # Replay fixes belong to the session being replaced
        await runner.stop()

    try:
        session = tracker.start_session(body.workout_type)
    except SessionAlreadyActiveError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return SessionOut.from_session(session, tracker.now())


@router.get("/current", response_model=Optional[SessionOut])
async def get_current_session(tracker: SessionTracker = Depends(get_tracker)):
    """Snapshot of the active session, or null."""
    session = tracker.current_session()
    if session is None:
        return None
    return SessionOut.from_session(session, tracker.now())


@router.post("/current/fixes", response_model=Optional[SessionOut])
async def add_fixes(
    fixes: List[FixIn],
    tracker: SessionTracker = Depends(get_tracker),
):
    """
    Apply location fixes to the active session, in list order.

    Returns the updated session, or null if none is active.
    """
    for fix in fixes:
        tracker.add_fix(fix.to_fix())

    session = tracker.current_session()
    if session is None:
        return None
    return SessionOut.from_session(session, tracker.now())


@router.post("/current/end", response_model=Optional[SessionOut])
async def end_session(
    tracker: SessionTracker = Depends(get_tracker),
    runner: TrackingRunner = Depends(get_runner),
    archive: SessionArchive = Depends(get_archive),
):
    """Finish the active session and archive it. Null if none is active."""
    await runner.stop()

    session = tracker.end_session()
    if session is None:
        return None

    archive.save(session)
    return SessionOut.from_session(session, tracker.now())


@router.post("/current/replay", response_model=ReplayStarted)
async def replay_gpx(
    file: UploadFile = File(...),
    tracker: SessionTracker = Depends(get_tracker),
    runner: TrackingRunner = Depends(get_runner),
):
    """
    Feed a recorded GPX track into the active session.

    The replay runs in the background; poll /current for progress.

    The tracker measures elapsed time on the wall clock, so with
    REPLAY_SPEEDUP != 1 the reported pace is the recorded pace times
    the speedup. The response carries a note when that applies.
    """
    if not file.filename or not file.filename.lower().endswith('.gpx'):
        raise HTTPException(status_code=400, detail="Only .gpx files are allowed")

    content = await file.read()

    if len(content) == 0:
        raise HTTPException(status_code=400, detail="File is empty")

    if len(content) > MAX_GPX_BYTES:
        raise HTTPException(status_code=400, detail="File too large (max 20MB)")

    session = tracker.current_session()
    if session is None:
        raise HTTPException(status_code=409, detail="No active workout session")

    try:
        source = GPXReplaySource(
            content,
            request=FixRequest.from_settings(settings),
            speedup=settings.replay_speedup,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not await runner.start(source):
        raise HTTPException(status_code=409, detail="A replay is already running")

    logger.info(f"Replaying {len(source.points)} GPX points into session {session.id}")
    return ReplayStarted(
        session_id=session.id,
        points_count=len(source.points),
        speedup=source.speedup,
        pace_note=replay_pace_note(source.speedup),
    )


def replay_pace_note(speedup: float) -> Optional[str]:
    if speedup == 1:
        return None
    return (
        f"Replay runs {speedup:g}x recorded time; "
        f"average pace is {speedup:g}x the recorded pace"
    )


@router.get("/archive", response_model=List[SessionOut])
async def list_archived_sessions(
    tracker: SessionTracker = Depends(get_tracker),
    archive: SessionArchive = Depends(get_archive),
):
    """Finished sessions, oldest first."""
    now = tracker.now()
    return [SessionOut.from_session(session, now) for session in archive.list()]
