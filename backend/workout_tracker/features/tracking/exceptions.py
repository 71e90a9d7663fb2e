"""
Tracking errors.

Idle-state operations are not errors: they return None instead of raising.
"""


class TrackingError(Exception):
    """Base error for workout tracking."""


class SessionAlreadyActiveError(TrackingError):
    """A session is active and the tracker rejects starting another."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Workout session {session_id} is already active")


class SourceUnavailableError(TrackingError):
    """The location source cannot be opened (e.g. permission denied)."""


class StreamInterruptedError(TrackingError):
    """The location source failed while a stream was being consumed."""
