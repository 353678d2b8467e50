"""Shared fixtures: deterministic clock and random source, isolated stores."""

from datetime import datetime, timedelta, timezone

import pytest

from verifake.detector import DetectionHeuristic
from verifake.service import DetectionService
from verifake.storage import EntityStore


class SteppingClock:
    """Returns a strictly increasing time, one second per call."""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


class FixedRandom:
    """random.Random stand-in whose random() cycles through fixed values."""

    def __init__(self, *values: float) -> None:
        self.values = list(values) or [0.0]
        self.calls = 0

    def random(self) -> float:
        value = self.values[self.calls % len(self.values)]
        self.calls += 1
        return value


@pytest.fixture
def clock():
    return SteppingClock(datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def store(clock):
    return EntityStore(seed=True, clock=clock)


@pytest.fixture
def empty_store(clock):
    return EntityStore(seed=False, clock=clock)


@pytest.fixture
def fixed_random():
    return FixedRandom(0.0)


@pytest.fixture
def service(store, fixed_random):
    return DetectionService(store, DetectionHeuristic(fixed_random), fixed_random)
