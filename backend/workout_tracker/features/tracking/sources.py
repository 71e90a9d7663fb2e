"""
Location fix sources.

A source is subscribed with `async with source.subscribe() as fixes:`
and yields GeoFix values in arrival order. The subscription is released
when the block exits, whether the stream ended, failed or was cancelled.

Sources:
- QueueFixSource: bridge for callback-style providers (push from any thread)
- GPXReplaySource: replays a recorded GPX track
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import AsyncIterator, Callable, List, Optional, Tuple

import gpxpy
import gpxpy.gpx

from workout_tracker.config import Settings

from .exceptions import SourceUnavailableError
from .models import GeoFix
from .tracker import wall_clock_ms

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FixRequest:
    """How often a source should deliver fixes (milliseconds)."""
    interval_ms: int = 1000
    fastest_interval_ms: int = 500
    max_update_delay_ms: int = 2000

    @classmethod
    def from_settings(cls, settings: Settings) -> "FixRequest":
        return cls(
            interval_ms=settings.location_update_interval_ms,
            fastest_interval_ms=settings.location_fastest_interval_ms,
            max_update_delay_ms=settings.location_max_update_delay_ms,
        )


class FixSource(ABC):
    """
    Abstract base class for location sources.

    Subclasses implement `_fixes()` and optionally `_open()`/`_close()`
    and `has_permission()`.
    """

    def __init__(self, request: Optional[FixRequest] = None):
        self.request = request or FixRequest()
        self._last_fix: Optional[GeoFix] = None
        self._active = False
        self._waiters: List[asyncio.Future] = []

    def has_permission(self) -> bool:
        """Whether the source is allowed to deliver locations."""
        return True

    def last_known(self) -> Optional[GeoFix]:
        """Most recent fix delivered by this source, if any."""
        return self._last_fix

    @property
    def subscribed(self) -> bool:
        """Whether a subscription is currently open."""
        return self._active

    async def next_fix(self) -> Optional[GeoFix]:
        """
        Wait for the next fix delivered to the open subscription.

        Resolves to None if the subscription closes first.
        """
        future = asyncio.get_running_loop().create_future()
        self._waiters.append(future)
        try:
            return await future
        finally:
            if future in self._waiters:
                self._waiters.remove(future)

    @asynccontextmanager
    async def subscribe(self) -> AsyncIterator[AsyncIterator[GeoFix]]:
        """
        Open the source and yield its fix stream.

        Raises:
            SourceUnavailableError: If permission is missing or the
                provider fails to start
        """
        if not self.has_permission():
            logger.warning("Location permission not granted")
            raise SourceUnavailableError("Location permission not granted")

        try:
            await self._open()
        except SourceUnavailableError:
            raise
        except Exception as e:
            logger.error(f"Failed to start location updates: {e}")
            raise SourceUnavailableError(f"Location source failed to start: {e}") from e

        logger.debug(f"Started location updates ({type(self).__name__})")
        self._active = True
        inner = self._fixes()
        outer = self._remember(inner)
        try:
            yield outer
        finally:
            await outer.aclose()
            await inner.aclose()
            await self._close()
            self._active = False
            self._wake_waiters(None)
            logger.debug(f"Stopped location updates ({type(self).__name__})")

    async def _remember(self, fixes: AsyncIterator[GeoFix]) -> AsyncIterator[GeoFix]:
        async for fix in fixes:
            self._last_fix = fix
            self._wake_waiters(fix)
            yield fix

    def _wake_waiters(self, fix: Optional[GeoFix]) -> None:
        waiters, self._waiters = self._waiters, []
        for future in waiters:
            if not future.done():
                future.set_result(fix)

    async def _open(self) -> None:
        pass

    async def _close(self) -> None:
        pass

    @abstractmethod
    def _fixes(self) -> AsyncIterator[GeoFix]:
        """Async generator producing fixes until the stream ends."""


# =============================================================================
# Callback Bridge
# =============================================================================

_END = object()


class _Failure:
    def __init__(self, error: BaseException):
        self.error = error


class QueueFixSource(FixSource):
    """
    Push-based source for callback providers.

    The provider calls push()/fail()/close() from any thread; items are
    handed to the subscriber's event loop in call order. Pushes while
    nobody is subscribed are dropped.

    Usage:
        source = QueueFixSource()
        provider.on_location = source.push

        async with source.subscribe() as fixes:
            async for fix in fixes:
                ...
    """

    def __init__(
        self,
        request: Optional[FixRequest] = None,
        permission: Callable[[], bool] = lambda: True,
    ):
        super().__init__(request)
        self._permission = permission
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._queue: Optional[asyncio.Queue] = None
        self._subscribed = asyncio.Event()

    def has_permission(self) -> bool:
        return self._permission()

    async def wait_subscribed(self) -> None:
        """Wait until a subscriber is attached."""
        await self._subscribed.wait()

    def push(self, fix: GeoFix) -> None:
        """Deliver a location update."""
        self._deliver(fix)

    def fail(self, error: BaseException) -> None:
        """Terminate the stream with a provider error."""
        self._deliver(_Failure(error))

    def close(self) -> None:
        """Terminate the stream normally."""
        self._deliver(_END)

    def _deliver(self, item) -> None:
        loop, queue = self._loop, self._queue
        if loop is None or queue is None:
            logger.debug("No subscriber, location update dropped")
            return
        loop.call_soon_threadsafe(queue.put_nowait, item)

    async def _open(self) -> None:
        if self._queue is not None:
            raise SourceUnavailableError("Location source already has a subscriber")
        self._loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue()
        self._subscribed.set()

    async def _close(self) -> None:
        self._subscribed.clear()
        self._loop = None
        self._queue = None

    async def _fixes(self) -> AsyncIterator[GeoFix]:
        queue = self._queue
        while True:
            item = await queue.get()
            if item is _END:
                return
            if isinstance(item, _Failure):
                raise item.error
            yield item


# =============================================================================
# GPX Replay
# =============================================================================

class GPXReplaySource(FixSource):
    """
    Replays the points of a GPX document as a live stream.

    Delay between fixes follows the recorded point times divided by
    `speedup`; points without time are spaced by the request interval.
    """

    def __init__(
        self,
        content: bytes | str,
        request: Optional[FixRequest] = None,
        speedup: float = 1.0,
        clock: Callable[[], int] = wall_clock_ms,
    ):
        super().__init__(request)
        if speedup <= 0:
            raise ValueError("speedup must be positive")
        self.points = self.parse_points(content)
        self.speedup = speedup
        self._clock = clock

    @staticmethod
    def parse_points(
        content: bytes | str
    ) -> List[Tuple[float, float, Optional[datetime], Optional[float]]]:
        """
        Extract points from GPX content.

        Returns:
            List of (lat, lon, time, horizontal_dilution) tuples

        Raises:
            ValueError: If GPX is invalid or has no points
        """
        if isinstance(content, bytes):
            content = content.decode('utf-8')

        try:
            gpx = gpxpy.parse(content)
        except Exception as e:
            logger.error(f"Failed to parse GPX: {e}")
            raise ValueError(f"Invalid GPX file: {e}")

        points = []

        # From tracks
        for track in gpx.tracks:
            for segment in track.segments:
                for point in segment.points:
                    points.append(GPXReplaySource._point_tuple(point))

        # From routes (if no tracks)
        if not points:
            for route in gpx.routes:
                for point in route.points:
                    points.append(GPXReplaySource._point_tuple(point))

        if not points:
            raise ValueError("GPX file contains no track or route points")

        return points

    @staticmethod
    def _point_tuple(point):
        return (
            point.latitude,
            point.longitude,
            point.time,
            getattr(point, "horizontal_dilution", None),
        )

    def _delay_seconds(
        self,
        previous: Optional[datetime],
        current: Optional[datetime]
    ) -> float:
        if previous is not None and current is not None:
            return max(0.0, (current - previous).total_seconds()) / self.speedup
        return self.request.interval_ms / 1000 / self.speedup

    async def _fixes(self) -> AsyncIterator[GeoFix]:
        previous_time = None
        for i, (lat, lon, point_time, dilution) in enumerate(self.points):
            if i > 0:
                await asyncio.sleep(self._delay_seconds(previous_time, point_time))
            previous_time = point_time

            if point_time is not None:
                timestamp_ms = int(point_time.timestamp() * 1000)
            else:
                timestamp_ms = self._clock()

            yield GeoFix.at(lat, lon, timestamp_ms, dilution)

        logger.debug(f"GPX replay finished: {len(self.points)} points")
