"""In-memory session and message store.

The single authoritative table of sessions and their message history for
this process. One instance is built in the FastAPI lifespan and injected into
the HTTP routes, the connection router and the cleanup sweep.

Every method is synchronous and completes in one step, so callers running on
the event loop can never observe a half-applied mutation. Absent sessions are
reported with ``None``/``False`` rather than exceptions.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

import structlog

from lingolive.models.session import Message, Sender, Session

logger = structlog.get_logger(__name__)

_IMMUTABLE_FIELDS = frozenset({"session_id", "created_at", "last_activity"})


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionStore:
    """Sessions keyed by id, each owning an append-only message list."""

    def __init__(
        self,
        default_language: str = "en",
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._default_language = default_language
        self._clock = clock
        self._sessions: dict[str, Session] = {}
        self._messages: dict[str, list[Message]] = {}

    def _touch(self, session: Session) -> None:
        now = self._clock()
        if now > session.last_activity:
            session.last_activity = now

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def create(self, site_key: str) -> Session:
        """Create a session with a fresh id and an empty history."""
        now = self._clock()
        session = Session(
            session_id=str(uuid.uuid4()),
            site_key=site_key,
            user_lang=self._default_language,
            created_at=now,
            last_activity=now,
        )
        self._sessions[session.session_id] = session
        self._messages[session.session_id] = []
        logger.info("session_created", session_id=session.session_id, site_key=site_key)
        return session

    def restore(self, session_id: str, site_key: str) -> tuple[Session, bool]:
        """Return the session, recreating it under the same id if it was lost.

        Surviving history is kept as-is, never duplicated. A recreated
        session takes its language from the latest surviving user message.

        Returns:
            ``(session, recreated)``.
        """
        session = self._sessions.get(session_id)
        if session is not None:
            return session, False

        history = self._messages.setdefault(session_id, [])
        user_lang = next(
            (m.original_lang for m in reversed(history) if m.sender is Sender.USER),
            self._default_language,
        )
        now = self._clock()
        session = Session(
            session_id=session_id,
            site_key=site_key,
            user_lang=user_lang,
            created_at=now,
            last_activity=now,
        )
        self._sessions[session_id] = session
        logger.info(
            "session_recreated",
            session_id=session_id,
            surviving_messages=len(history),
            user_lang=user_lang,
        )
        return session, True

    def get(self, session_id: str) -> Session | None:
        return self._sessions.get(session_id)

    def list_sessions(self) -> list[Session]:
        return list(self._sessions.values())

    def update(self, session_id: str, /, **fields: Any) -> bool:
        """Merge fields into a session and refresh ``last_activity``.

        Returns ``False`` when the session does not exist.
        """
        session = self._sessions.get(session_id)
        if session is None:
            return False
        for name in fields:
            if name in _IMMUTABLE_FIELDS or not hasattr(session, name):
                raise ValueError(f"Field {name!r} cannot be updated")
        for name, value in fields.items():
            setattr(session, name, value)
        self._touch(session)
        return True

    def bind_connection(self, session_id: str, connection_id: str) -> bool:
        """Bind a widget connection. The last bound connection wins."""
        bound = self.update(session_id, connection_id=connection_id)
        if bound:
            logger.debug("session_connection_bound", session_id=session_id, connection_id=connection_id)
        return bound

    def unbind_connection(self, session_id: str, connection_id: str) -> bool:
        """Unbind only if the session is still bound to ``connection_id``."""
        session = self._sessions.get(session_id)
        if session is None or session.connection_id != connection_id:
            return False
        session.connection_id = None
        self._touch(session)
        return True

    def delete(self, session_id: str) -> bool:
        """Remove a session and its messages. ``False`` if it was absent."""
        session = self._sessions.pop(session_id, None)
        self._messages.pop(session_id, None)
        if session is None:
            return False
        logger.info("session_deleted", session_id=session_id)
        return True

    def sweep(self, max_age: timedelta) -> int:
        """Delete every session idle for longer than ``max_age``."""
        cutoff = self._clock() - max_age
        stale = [sid for sid, s in self._sessions.items() if s.last_activity < cutoff]
        for session_id in stale:
            del self._sessions[session_id]
            self._messages.pop(session_id, None)
        if stale:
            logger.info("sessions_swept", count=len(stale))
        return len(stale)

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    def append(
        self,
        session_id: str,
        *,
        sender: Sender,
        original_text: str,
        translated_text: str,
        original_lang: str,
        target_lang: str,
    ) -> Message | None:
        """Append a message with a server-generated id and timestamp."""
        session = self._sessions.get(session_id)
        if session is None:
            return None
        message = Message(
            id=str(uuid.uuid4()),
            session_id=session_id,
            sender=Sender(sender),
            original_text=original_text,
            translated_text=translated_text,
            original_lang=original_lang,
            target_lang=target_lang,
            timestamp=self._clock(),
        )
        self._messages.setdefault(session_id, []).append(message)
        self._touch(session)
        logger.debug("message_appended", session_id=session_id, sender=message.sender.value)
        return message

    def list(self, session_id: str) -> list[Message]:
        return list(self._messages.get(session_id, ()))

    def list_recent(self, session_id: str, limit: int = 50) -> list[Message]:
        if limit <= 0:
            return []
        return list(self._messages.get(session_id, ())[-limit:])

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions
