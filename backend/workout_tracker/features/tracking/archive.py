"""
Session archive.

Where finished sessions are handed off after end_session().
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import List

from .models import WorkoutSession

logger = logging.getLogger(__name__)


class SessionArchive(ABC):
    """Storage for finished workout sessions."""

    @abstractmethod
    def save(self, session: WorkoutSession) -> None:
        """Store a finished session."""
        pass

    @abstractmethod
    def list(self) -> List[WorkoutSession]:
        """All stored sessions, oldest first."""
        pass


class InMemorySessionArchive(SessionArchive):
    """Process-local archive, kept in end order."""

    def __init__(self):
        self._sessions: List[WorkoutSession] = []
        self._lock = threading.Lock()

    def save(self, session: WorkoutSession) -> None:
        if session.end_time is None:
            raise ValueError(f"Session {session.id} is still active")
        with self._lock:
            self._sessions.append(session)
        logger.info(f"Archived workout session {session.id}")

    def list(self) -> List[WorkoutSession]:
        with self._lock:
            return list(self._sessions)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
