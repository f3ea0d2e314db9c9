"""In-memory session store.

Each session owns one ``Calculator``. Every key press goes through the
store, which checks the resulting state against the state rules and
keeps timestamp bookkeeping. Nothing is persisted.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from config import DEFAULT_CONFIG, CalculatorConfig
from engine import Calculator
from logs import get_logger
from models import DisplaySnapshot, Key, SessionView
from spec import ValidationReport, validate_state

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex


class SessionNotFoundError(Exception):
    """Raised when a session lookup fails."""

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f"Session not found: {session_id}")


class SessionStateError(Exception):
    """Raised when a key press leaves a calculator in an invalid state."""

    def __init__(self, report: ValidationReport) -> None:
        self.report = report
        super().__init__(report.summary())


@dataclass
class Session:
    calculator: Calculator
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def view(self) -> SessionView:
        return SessionView(
            id=self.id,
            snapshot=self.calculator.snapshot(),
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class SessionStore:
    """In-memory store of calculator sessions."""

    def __init__(self, config: CalculatorConfig = DEFAULT_CONFIG) -> None:
        self.config = config
        self._sessions: dict[str, Session] = {}

    # -- helpers -------------------------------------------------------------

    def _validate_or_raise(self, calculator: Calculator) -> None:
        report = validate_state(calculator.state)
        if not report.passed:
            raise SessionStateError(report)

    # -- sessions ------------------------------------------------------------

    def create(self) -> Session:
        """Open a new session with a calculator at its identity state."""
        now = _utcnow()
        session = Session(
            calculator=Calculator(self.config),
            created_at=now,
            updated_at=now,
        )
        self._sessions[session.id] = session
        logger.info("session %s created", session.id)
        return session

    def get(self, session_id: str) -> Session:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None

    def list(self, *, offset: int = 0, limit: int = 50) -> list[Session]:
        """List sessions, most recently used first."""
        items = sorted(
            self._sessions.values(), key=lambda s: s.updated_at, reverse=True
        )
        return items[offset : offset + limit]

    def press(self, session_id: str, key: Key | str) -> DisplaySnapshot:
        """Press one key on a session's calculator.

        The previous state is restored if the new one breaks a rule.
        """
        session = self.get(session_id)
        calculator = session.calculator
        previous = calculator.state
        snap = calculator.press(key)
        try:
            self._validate_or_raise(calculator)
        except SessionStateError:
            session.calculator = Calculator(self.config, previous)
            raise
        session.updated_at = _utcnow()
        return snap

    def copy(self, session_id: str) -> str | None:
        """Clipboard text for a session, or None if no answer is showing."""
        return self.get(session_id).calculator.copy_text()

    def delete(self, session_id: str) -> Session:
        session = self.get(session_id)
        del self._sessions[session_id]
        logger.info("session %s deleted", session_id)
        return session

    def count(self) -> int:
        return len(self._sessions)

    def clear(self) -> None:
        """Remove all sessions (useful for testing)."""
        self._sessions.clear()
