"""
Tests for SessionTracker.

Covers the Idle/Active state machine, metric derivation and snapshot
isolation.
"""

import math
import random
import threading

import pytest

from workout_tracker.features.tracking import (
    GeoFix,
    SessionAlreadyActiveError,
    SessionTracker,
    StartPolicy,
)
from workout_tracker.shared.constants import WorkoutType
from workout_tracker.shared.geo import path_distance


# =============================================================================
# Fixtures
# =============================================================================

class FakeClock:
    """Manually advanced epoch-ms clock."""

    def __init__(self, now_ms: int = 1_700_000_000_000):
        self.now_ms = now_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, ms: int) -> None:
        self.now_ms += ms


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def tracker(clock):
    return SessionTracker(clock=clock)


@pytest.fixture
def strict_tracker(clock):
    return SessionTracker(policy=StartPolicy.REJECT, clock=clock)


def fix(lat: float, lon: float, t: int = 0) -> GeoFix:
    return GeoFix.at(lat, lon, t)


# =============================================================================
# Test Start Session
# =============================================================================

class TestStartSession:
    """Tests for start_session."""

    def test_creates_empty_active_session(self, tracker, clock):
        session = tracker.start_session(WorkoutType.CYCLING)

        assert session.is_active
        assert session.start_time == clock.now_ms
        assert session.end_time is None
        assert session.path == ()
        assert session.total_distance == 0.0
        assert session.average_pace == 0.0
        assert session.calories_burned == 0
        assert session.workout_type is WorkoutType.CYCLING
        assert tracker.is_active

    def test_default_type_is_running(self, tracker):
        assert tracker.start_session().workout_type is WorkoutType.RUNNING

    def test_accepts_type_value(self, tracker):
        assert tracker.start_session("hiking").workout_type is WorkoutType.HIKING

    def test_unknown_type_rejected(self, tracker):
        with pytest.raises(ValueError):
            tracker.start_session("swimming")
        assert not tracker.is_active

    def test_ids_are_unique(self, tracker):
        ids = {tracker.start_session().id for _ in range(50)}
        assert len(ids) == 50

    def test_replace_policy_discards_active_session(self, tracker, clock):
        """Default policy: old session is dropped without being finalized."""
        first = tracker.start_session()
        tracker.add_fix(fix(43.0, 76.0))
        clock.advance(1000)

        second = tracker.start_session(WorkoutType.WALKING)

        current = tracker.current_session()
        assert current.id == second.id != first.id
        assert current.path == ()
        assert current.workout_type is WorkoutType.WALKING
        assert tracker.end_session().id == second.id
        assert tracker.end_session() is None

    def test_reject_policy_raises(self, strict_tracker):
        first = strict_tracker.start_session()
        strict_tracker.add_fix(fix(43.0, 76.0))

        with pytest.raises(SessionAlreadyActiveError) as exc_info:
            strict_tracker.start_session()

        assert exc_info.value.session_id == first.id
        current = strict_tracker.current_session()
        assert current.id == first.id
        assert current.points_count == 1

    def test_reject_policy_allows_start_after_end(self, strict_tracker):
        strict_tracker.start_session()
        strict_tracker.end_session()
        assert strict_tracker.start_session().is_active

    def test_policy_from_value(self, clock):
        assert SessionTracker(policy="reject", clock=clock).policy is StartPolicy.REJECT


# =============================================================================
# Test Add Fix
# =============================================================================

class TestAddFix:
    """Tests for add_fix and derived metrics."""

    def test_reference_scenario(self, tracker, clock):
        """Two fixes ~11.1 m apart in San Francisco."""
        tracker.start_session(WorkoutType.RUNNING)
        tracker.add_fix(fix(37.7749, -122.4194, 0))
        clock.advance(1000)
        tracker.add_fix(fix(37.7750, -122.4194, 1000))

        session = tracker.current_session()
        assert session.points_count == 2
        assert session.total_distance == pytest.approx(11.1, rel=0.01)

    def test_single_point_has_no_distance(self, tracker, clock):
        tracker.start_session()
        clock.advance(5000)
        tracker.add_fix(fix(43.0, 76.0))

        session = tracker.current_session()
        assert session.total_distance == 0.0
        assert session.average_pace == 0.0
        assert session.calories_burned == 0

    def test_pace_is_distance_over_elapsed(self, tracker, clock):
        tracker.start_session()
        tracker.add_fix(fix(43.0, 76.0))
        clock.advance(40_000)
        tracker.add_fix(fix(43.001, 76.0))

        session = tracker.current_session()
        assert session.average_pace == pytest.approx(session.total_distance / 40.0)

    def test_pace_zero_when_no_time_elapsed(self, tracker):
        """Clock never advances: elapsed is 0, pace must be 0."""
        tracker.start_session()
        tracker.add_fix(fix(43.0, 76.0))
        tracker.add_fix(fix(43.01, 76.0))

        session = tracker.current_session()
        assert session.total_distance > 1000
        assert session.average_pace == 0.0

    def test_pace_zero_when_clock_goes_backwards(self, tracker, clock):
        tracker.start_session()
        clock.advance(-5000)
        tracker.add_fix(fix(43.0, 76.0))
        tracker.add_fix(fix(43.01, 76.0))
        assert tracker.current_session().average_pace == 0.0

    def test_calories_floor_of_distance_over_ten(self, tracker, clock):
        tracker.start_session()
        tracker.add_fix(fix(43.0, 76.0))
        clock.advance(60_000)
        tracker.add_fix(fix(43.001, 76.0))  # ~111.2 m

        session = tracker.current_session()
        assert session.calories_burned == math.floor(session.total_distance / 10)
        assert session.calories_burned == 11

    def test_calories_ignore_workout_type(self, clock):
        results = []
        for workout_type in WorkoutType:
            tracker = SessionTracker(clock=clock)
            tracker.start_session(workout_type)
            tracker.add_fix(fix(43.0, 76.0))
            tracker.add_fix(fix(43.01, 76.0))
            results.append(tracker.current_session().calories_burned)
        assert len(set(results)) == 1

    def test_path_keeps_arrival_order(self, tracker):
        tracker.start_session()
        points = [(43.0, 76.0), (43.2, 76.1), (43.1, 76.3), (43.0, 76.0)]
        for lat, lon in points:
            tracker.add_fix(fix(lat, lon))

        assert [tuple(p) for p in tracker.current_session().path] == points

    def test_distance_matches_full_recompute(self, tracker, clock):
        """Running sum agrees with path_distance over the whole path."""
        rng = random.Random(42)
        tracker.start_session()
        lat, lon = 37.7749, -122.4194

        for _ in range(500):
            lat += rng.uniform(-0.0005, 0.0005)
            lon += rng.uniform(-0.0005, 0.0005)
            clock.advance(rng.randint(200, 2000))
            tracker.add_fix(fix(lat, lon))

            session = tracker.current_session()
            expected = path_distance(session.path)
            assert session.total_distance == pytest.approx(expected, rel=1e-6)
            assert session.calories_burned == math.floor(session.total_distance / 10)

    def test_distance_never_decreases(self, tracker, clock):
        tracker.start_session()
        previous = 0.0
        for i in range(20):
            clock.advance(1000)
            tracker.add_fix(fix(43.0 + (i % 3) * 0.001, 76.0))
            distance = tracker.current_session().total_distance
            assert distance >= previous
            previous = distance

    def test_accuracy_is_not_used(self, tracker):
        tracker.start_session()
        tracker.add_fix(GeoFix.at(43.0, 76.0, 0, accuracy_m=3.0))
        tracker.add_fix(GeoFix.at(43.001, 76.0, 1000, accuracy_m=500.0))
        assert tracker.current_session().points_count == 2


# =============================================================================
# Test Idle Behaviour
# =============================================================================

class TestIdle:
    """Idle-state calls are no-ops, never errors."""

    def test_add_fix_before_start_is_dropped(self, tracker):
        for _ in range(5):
            tracker.add_fix(fix(43.0, 76.0))
        assert tracker.current_session() is None
        assert not tracker.is_active

    def test_end_session_when_idle(self, tracker):
        for _ in range(3):
            assert tracker.end_session() is None

    def test_dropped_fixes_not_carried_into_next_session(self, tracker):
        tracker.add_fix(fix(43.0, 76.0))
        tracker.start_session()
        assert tracker.current_session().path == ()

    def test_add_fix_after_end_is_dropped(self, tracker):
        tracker.start_session()
        tracker.add_fix(fix(43.0, 76.0))
        ended = tracker.end_session()

        tracker.add_fix(fix(43.01, 76.0))

        assert tracker.current_session() is None
        assert ended.points_count == 1


# =============================================================================
# Test End Session
# =============================================================================

class TestEndSession:
    """Tests for end_session."""

    def test_sets_end_time_and_goes_idle(self, tracker, clock):
        started = tracker.start_session()
        clock.advance(90_000)

        ended = tracker.end_session()

        assert ended.id == started.id
        assert ended.end_time == clock.now_ms
        assert not ended.is_active
        assert ended.duration_ms(clock.now_ms + 10_000) == 90_000
        assert not tracker.is_active

    def test_metrics_frozen_at_last_update(self, tracker, clock):
        tracker.start_session()
        tracker.add_fix(fix(43.0, 76.0))
        clock.advance(30_000)
        tracker.add_fix(fix(43.001, 76.0))
        before = tracker.current_session()

        clock.advance(30_000)
        ended = tracker.end_session()

        assert ended.total_distance == before.total_distance
        assert ended.average_pace == before.average_pace
        assert ended.calories_burned == before.calories_burned
        assert ended.path == before.path

    def test_second_end_returns_none(self, tracker):
        tracker.start_session()
        assert tracker.end_session() is not None
        assert tracker.end_session() is None


# =============================================================================
# Test Snapshots
# =============================================================================

class TestSnapshots:
    """Snapshots are independent of later updates."""

    def test_old_snapshot_unchanged_by_new_fixes(self, tracker, clock):
        tracker.start_session()
        tracker.add_fix(fix(43.0, 76.0))
        snapshot = tracker.current_session()

        clock.advance(1000)
        tracker.add_fix(fix(43.001, 76.0))

        assert snapshot.points_count == 1
        assert snapshot.total_distance == 0.0
        assert tracker.current_session().points_count == 2

    def test_snapshot_is_immutable(self, tracker):
        session = tracker.start_session()
        with pytest.raises(AttributeError):
            session.total_distance = 100.0

    def test_duration_while_active(self, tracker, clock):
        session = tracker.start_session()
        assert session.duration_ms(clock.now_ms + 65_000) == 65_000


# =============================================================================
# Test Concurrency
# =============================================================================

class TestConcurrency:
    """Fixes pushed from a worker thread while readers take snapshots."""

    def test_readers_never_see_torn_state(self, clock):
        tracker = SessionTracker(clock=clock)
        tracker.start_session()
        clock.advance(1000)
        errors = []
        done = threading.Event()

        def producer():
            for i in range(2000):
                tracker.add_fix(fix(43.0 + i * 0.0001, 76.0))
            done.set()

        def reader():
            while not done.is_set():
                session = tracker.current_session()
                if session.calories_burned != math.floor(session.total_distance / 10):
                    errors.append("calories")
                if session.average_pace != pytest.approx(session.total_distance / 1.0):
                    errors.append("pace")
                if session.total_distance != pytest.approx(path_distance(session.path), rel=1e-6):
                    errors.append("distance")

        threads = [threading.Thread(target=producer)] + [
            threading.Thread(target=reader) for _ in range(3)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert tracker.current_session().points_count == 2000
