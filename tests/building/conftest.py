"""Fixtures for build session tests.

Time is fully controlled: ``clock`` drives session timestamps and expiry,
``scheduler`` drives the save debounce.
"""

from datetime import UTC, datetime, timedelta

import pytest
from building.session.scheduler import ManualScheduler
from building.session.storage import MemoryStorage
from building.session.store import SessionStore


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture()
def clock():
    return FakeClock(datetime(2025, 1, 15, 12, 0, tzinfo=UTC))


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def storage():
    return MemoryStorage()


@pytest.fixture()
def store(storage, clock, scheduler):
    return SessionStore(storage, clock=clock, scheduler=scheduler)
