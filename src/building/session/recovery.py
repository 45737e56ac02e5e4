"""Session recovery prompt: offers to resume or discard a saved build.

State Machine:
    NOT_CHECKED → OFFERING → RESUMED
    NOT_CHECKED → OFFERING → DISCARDED
    NOT_CHECKED → IDLE
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

import structlog

from building.session.session import BuildSession
from building.session.store import SessionStore, _utcnow

logger = structlog.get_logger(__name__)


class PromptState(Enum):
    NOT_CHECKED = "NotChecked"
    OFFERING = "Offering"
    IDLE = "Idle"
    RESUMED = "Resumed"
    DISCARDED = "Discarded"


_VALID_TRANSITIONS = {
    PromptState.NOT_CHECKED: {PromptState.OFFERING, PromptState.IDLE},
    PromptState.OFFERING: {PromptState.RESUMED, PromptState.DISCARDED},
    PromptState.IDLE: set(),  # Terminal
    PromptState.RESUMED: set(),  # Terminal
    PromptState.DISCARDED: set(),  # Terminal
}


class InvalidPromptTransition(Exception):
    pass


@dataclass(frozen=True)
class RecoverySummary:
    """What the prompt tells the shopper about the saved build."""

    team_name: str | None
    plaque_name: str | None
    players_added: int
    cards_selected: int
    time_ago: str


def time_ago(then: datetime, now: datetime) -> str:
    elapsed = max((now - then).total_seconds(), 0)
    minutes = int(elapsed // 60)
    hours = int(elapsed // 3600)
    days = int(elapsed // 86400)

    if days > 0:
        return f"{days} day{'s' if days > 1 else ''} ago"
    if hours > 0:
        return f"{hours} hour{'s' if hours > 1 else ''} ago"
    if minutes > 0:
        return f"{minutes} minute{'s' if minutes > 1 else ''} ago"
    return "just now"


class SessionRecoveryPrompt:
    def __init__(
        self,
        store: SessionStore,
        on_restore: Callable[[BuildSession], None],
        on_dismiss: Callable[[], None] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._on_restore = on_restore
        self._on_dismiss = on_dismiss
        self._clock = clock or _utcnow
        self.state = PromptState.NOT_CHECKED
        self.session: BuildSession | None = None

    @property
    def visible(self) -> bool:
        return self.state == PromptState.OFFERING

    def _transition(self, target: PromptState) -> None:
        if target not in _VALID_TRANSITIONS[self.state]:
            raise InvalidPromptTransition(f"Cannot transition from {self.state.value} to {target.value}")
        self.state = target

    def check(self) -> PromptState:
        """Look for a resumable session; called once on initial load."""
        session = self._store.get()
        if session is not None and not session.is_complete:
            self._transition(PromptState.OFFERING)
            self.session = session
            logger.info("Offering build session recovery", session_id=session.session_id)
        else:
            self._transition(PromptState.IDLE)
        return self.state

    def resume(self) -> BuildSession:
        self._transition(PromptState.RESUMED)
        self._on_restore(self.session)
        logger.info("Build session resumed", session_id=self.session.session_id)
        return self.session

    def discard(self) -> None:
        self._transition(PromptState.DISCARDED)
        self._store.clear()
        if self._on_dismiss is not None:
            self._on_dismiss()
        logger.info("Build session discarded", session_id=self.session.session_id)

    def summary(self) -> RecoverySummary | None:
        if self.session is None:
            return None
        session = self.session
        return RecoverySummary(
            team_name=session.team_name or None,
            plaque_name=session.selected_plaque.name if session.selected_plaque else None,
            players_added=session.filled_positions,
            cards_selected=len(session.selected_cards),
            time_ago=time_ago(session.last_updated, self._clock()),
        )
