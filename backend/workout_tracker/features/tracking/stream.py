"""
Location stream consumption.

Feeds fixes from a FixSource into a SessionTracker. Stream end, failure
or cancellation never finalizes the session: ending it is an explicit
tracker.end_session() call.
"""

import asyncio
import logging
from typing import Optional

from .exceptions import StreamInterruptedError, TrackingError
from .models import GeoFix
from .sources import FixSource
from .tracker import SessionTracker

logger = logging.getLogger(__name__)


async def track(tracker: SessionTracker, source: FixSource) -> int:
    """
    Apply every fix from `source` to `tracker`, in arrival order.

    Returns:
        Number of fixes consumed when the stream ends normally

    Raises:
        SourceUnavailableError: If the source can't be opened
        StreamInterruptedError: If the source fails mid-stream
    """
    consumed = 0

    async with source.subscribe() as fixes:
        try:
            async for fix in fixes:
                tracker.add_fix(fix)
                consumed += 1
        except Exception as e:
            logger.error(f"Location stream interrupted after {consumed} fixes: {e}")
            raise StreamInterruptedError(f"Location stream interrupted: {e}") from e

    logger.info(f"Location stream ended after {consumed} fixes")
    return consumed


async def current_fix(source: FixSource) -> Optional[GeoFix]:
    """
    One-shot position lookup.

    Uses the last known fix when there is one, otherwise waits for a
    fresh fix, sharing a subscription that is already running. Returns
    None without permission or if the stream ends before delivering
    anything.
    """
    if not source.has_permission():
        logger.warning("Location permission not granted")
        return None

    fix = source.last_known()
    if fix is not None:
        return fix

    if source.subscribed:
        logger.debug("Location updates already running, waiting for next fix")
        return await source.next_fix()

    logger.debug("Last location is unknown, requesting fresh location")
    async with source.subscribe() as fixes:
        async for fix in fixes:
            return fix
    return None


class TrackingRunner:
    """
    Runs `track()` as a background task.

    Usage:
        runner = TrackingRunner(tracker)
        await runner.start(source)
        # ... later ...
        await runner.stop()
    """

    def __init__(self, tracker: SessionTracker):
        self.tracker = tracker
        self.last_error: Optional[TrackingError] = None
        self.fixes_consumed: Optional[int] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self, source: FixSource) -> bool:
        """Start consuming `source`. Returns False if already running."""
        if self.running:
            return False

        self.last_error = None
        self.fixes_consumed = None
        self._task = asyncio.create_task(self._run(source))
        logger.info(f"Tracking started ({type(source).__name__})")
        return True

    async def stop(self) -> None:
        """Cancel the running stream, if any, and wait for cleanup."""
        task = self._task
        if task is None:
            return

        if not task.done():
            task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Tracking stopped")

    async def wait(self) -> None:
        """Wait for the current stream to end on its own."""
        if self._task is not None:
            await self._task

    async def _run(self, source: FixSource) -> None:
        try:
            self.fixes_consumed = await track(self.tracker, source)
        except TrackingError as e:
            self.last_error = e
            logger.error(f"Tracking ended with error: {e}")
