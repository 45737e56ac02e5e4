"""Delayed-call schedulers used to debounce session writes.

TimerScheduler runs callbacks on a background ``threading.Timer``.
ManualScheduler only runs callbacks when ``advance()`` is called, which
makes debounce behaviour deterministic in tests.
"""

import threading
from abc import ABC, abstractmethod
from collections.abc import Callable


class ScheduledCall(ABC):
    @abstractmethod
    def cancel(self) -> None: ...


class Scheduler(ABC):
    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        """Run ``callback`` once after ``delay`` seconds."""
        ...


class _TimerCall(ScheduledCall):
    def __init__(self, timer: threading.Timer) -> None:
        self._timer = timer

    def cancel(self) -> None:
        self._timer.cancel()


class TimerScheduler(Scheduler):
    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return _TimerCall(timer)


class _ManualCall(ScheduledCall):
    def __init__(self, due: float, callback: Callable[[], None]) -> None:
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler(Scheduler):
    """Scheduler driven by explicit ``advance(seconds)`` calls."""

    def __init__(self) -> None:
        self.elapsed = 0.0
        self._calls: list[_ManualCall] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        call = _ManualCall(self.elapsed + delay, callback)
        self._calls.append(call)
        return call

    @property
    def pending(self) -> int:
        return sum(1 for c in self._calls if not c.cancelled)

    def advance(self, seconds: float) -> None:
        """Move time forward and run every call that has become due, in order."""
        self.elapsed += seconds
        due = sorted(
            (c for c in self._calls if not c.cancelled and c.due <= self.elapsed),
            key=lambda c: c.due,
        )
        self._calls = [c for c in self._calls if c not in due and not c.cancelled]
        for call in due:
            call.callback()
