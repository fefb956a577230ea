from __future__ import annotations

import itertools
from typing import Callable, Optional

import pytest

from src.altar_attendance.altar_attendance.attendance.model import Snapshot, copy_attendance
from src.altar_attendance.altar_attendance.attendance.store import AttendanceStore
from src.altar_attendance.altar_attendance.cache.repository import InMemoryCache
from src.altar_attendance.altar_attendance.core.exceptions import LoadFailure, SaveFailure


class ManualTimer:
    """threading.Timer stand-in that only fires when the test says so."""

    def __init__(self, interval: float, function: Callable[[], object]):
        self.interval = interval
        self.function = function
        self.daemon = False
        self.started = False
        self.cancelled = False
        self.fired = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        if self.cancelled or self.fired:
            return
        self.fired = True
        self.function()


class ManualTimers:
    def __init__(self):
        self.created: list[ManualTimer] = []

    def __call__(self, interval: float, function: Callable[[], object]) -> ManualTimer:
        timer = ManualTimer(interval, function)
        self.created.append(timer)
        return timer

    @property
    def armed(self) -> list[ManualTimer]:
        return [t for t in self.created if t.started and not t.cancelled and not t.fired]

    def fire_pending(self) -> None:
        for timer in self.armed:
            timer.fire()


class FakeGateway:
    def __init__(self, remote: Optional[Snapshot] = None, *, fail_load: bool = False, fail_save: bool = False):
        self.remote = remote or Snapshot()
        self.fail_load = fail_load
        self.fail_save = fail_save
        self.saves: list[tuple[list, dict]] = []
        self.on_save: Optional[Callable[[], None]] = None

    def load(self, group_key: str) -> Snapshot:
        if self.fail_load:
            raise LoadFailure("remote offline")
        return Snapshot(
            roster=[e for e in self.remote.roster if e.group_key == group_key],
            attendance=copy_attendance(self.remote.attendance),
        )

    def save(self, roster, attendance) -> None:
        if self.on_save:
            self.on_save()
        if self.fail_save:
            raise SaveFailure("remote offline")
        self.saves.append((list(roster), copy_attendance(attendance)))


@pytest.fixture
def timers() -> ManualTimers:
    return ManualTimers()


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def make_store(timers, gateway):
    def _make(group_key: str = "8am", *, cache=None, gateway_=None, load: bool = True, **kwargs) -> AttendanceStore:
        ids = itertools.count(1)
        kwargs.setdefault("id_factory", lambda: f"s{next(ids)}")
        store = AttendanceStore(
            group_key,
            cache if cache is not None else InMemoryCache(),
            gateway_ if gateway_ is not None else gateway,
            timer_factory=timers,
            **kwargs,
        )
        if load:
            store.load()
        return store

    return _make


@pytest.fixture
def store(make_store) -> AttendanceStore:
    return make_store()


@pytest.fixture
def work_date() -> str:
    return "2024-01-07"
