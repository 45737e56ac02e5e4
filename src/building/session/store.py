"""Build session store: saves and restores an in-progress plaque build.

Writes are debounced: every ``save()`` merges its fields into a pending
change set and (re)starts a 500 ms timer, so a burst of edits results in a
single physical write carrying the last value of each field. Reads treat a
session older than seven days as absent and delete it.

Storage failures (quota, corrupt JSON, I/O) never escape the store: they are
logged and the store behaves as if no session exists.

Observers registered with ``subscribe()`` are called with the current
session (or None) after every write and clear, so multiple views in the
same process stay in step.
"""

import threading
from collections.abc import Callable, Mapping
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any

import structlog
from pydantic import ValidationError

from building.session.scheduler import ScheduledCall, Scheduler, TimerScheduler
from building.session.session import (
    SESSION_VERSION,
    BuildSession,
    field_name_for,
    generate_session_id,
)
from building.session.storage import StorageError, StoragePort

logger = structlog.get_logger(__name__)

STORAGE_KEY = "rosterframe_build_session"
SESSION_EXPIRY = timedelta(days=7)
SAVE_DEBOUNCE_SECONDS = 0.5

_MANAGED_FIELDS = {"version", "session_id", "last_updated"}


class SessionEvent(Enum):
    UPDATED = "session-updated"
    CLEARED = "session-cleared"


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SessionStore:
    def __init__(
        self,
        storage: StoragePort,
        clock: Callable[[], datetime] = _utcnow,
        scheduler: Scheduler | None = None,
        key: str = STORAGE_KEY,
        expiry: timedelta = SESSION_EXPIRY,
        debounce_seconds: float = SAVE_DEBOUNCE_SECONDS,
    ) -> None:
        self._storage = storage
        self._clock = clock
        self._scheduler = scheduler or TimerScheduler()
        self._key = key
        self._expiry = expiry
        self._debounce_seconds = debounce_seconds

        self._lock = threading.RLock()
        self._pending: dict[str, Any] = {}
        self._timer: ScheduledCall | None = None
        self._subscribers: list[Callable[[BuildSession | None], None]] = []

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def get(self) -> BuildSession | None:
        """Return the stored session, or None if absent, unreadable or expired."""
        try:
            raw = self._storage.get(self._key)
            if raw is None:
                return None
            session = BuildSession.model_validate_json(raw)
        except (StorageError, ValidationError) as exc:
            logger.warning("Error loading build session", key=self._key, error=str(exc))
            return None

        if session.version != SESSION_VERSION:
            logger.info(
                "Ignoring build session with unknown version",
                session_id=session.session_id,
                version=session.version,
            )
            return None

        if session.last_updated.tzinfo is None:
            session = session.model_copy(update={"last_updated": session.last_updated.replace(tzinfo=UTC)})
        if self._clock() - session.last_updated > self._expiry:
            logger.info("Build session expired", session_id=session.session_id)
            self.clear()
            return None

        return session

    def has_session(self) -> bool:
        """True if an unexpired session exists that has not reached the done step."""
        session = self.get()
        return session is not None and not session.is_complete

    # -------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------
    def save(self, changes: Mapping[str, Any]) -> None:
        """Merge ``changes`` into the session; the write happens after the debounce delay.

        Keys may be given in camelCase (as stored) or snake_case.
        """
        with self._lock:
            for key, value in changes.items():
                name = field_name_for(key)
                if name is None or name in _MANAGED_FIELDS:
                    logger.warning("Ignoring unknown build session field", field=key)
                    continue
                self._pending[name] = value

            if self._timer is not None:
                self._timer.cancel()
            self._timer = self._scheduler.call_later(self._debounce_seconds, self._write)

    def flush(self) -> None:
        """Write any pending changes immediately."""
        with self._lock:
            if self._timer is None:
                return
            self._timer.cancel()
        self._write()

    def clear(self) -> None:
        """Drop pending changes, remove the stored session and notify observers."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._pending.clear()
            try:
                self._storage.remove(self._key)
            except StorageError as exc:
                logger.warning("Error clearing build session", key=self._key, error=str(exc))
        self._notify(SessionEvent.CLEARED)

    def _write(self) -> None:
        with self._lock:
            self._timer = None
            changes, self._pending = self._pending, {}
            if not changes:
                return

            existing = self.get()
            now = self._clock()
            if existing is not None:
                data = existing.model_dump()
                # lastUpdated must move forward even if the clock has not
                now = max(now, existing.last_updated + timedelta(microseconds=1))
                session_id = existing.session_id
            else:
                data = {}
                session_id = generate_session_id(now)

            data.update(changes)
            data.update(version=SESSION_VERSION, session_id=session_id, last_updated=now)

            try:
                session = BuildSession.model_validate(data)
                self._storage.set(self._key, session.to_json())
            except (StorageError, ValidationError) as exc:
                logger.error("Error saving build session", key=self._key, error=str(exc))
                return

            logger.debug(
                "Build session saved",
                session_id=session.session_id,
                step=session.current_step.value,
            )
        self._notify(SessionEvent.UPDATED)

    # -------------------------------------------------------------------
    # Change notification
    # -------------------------------------------------------------------
    def subscribe(self, callback: Callable[[BuildSession | None], None]) -> Callable[[], None]:
        """Register an observer; returns a function that removes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self, event: SessionEvent) -> None:
        if not self._subscribers:
            return
        session = self.get()
        for callback in list(self._subscribers):
            try:
                callback(session)
            except Exception as exc:
                logger.error(
                    "Build session observer failed",
                    session_event=event.value,
                    error=str(exc),
                )
