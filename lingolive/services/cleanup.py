"""Periodic removal of inactive sessions.

Runs as an APScheduler interval job registered in the lifespan. The job is
registered with ``max_instances=1`` so two sweeps never overlap.
"""

from datetime import timedelta

import structlog

from lingolive.store.sessions import SessionStore

logger = structlog.get_logger(__name__)


class SessionSweeper:
    """Deletes sessions (and their messages) idle for longer than ``max_age``."""

    def __init__(self, store: SessionStore, max_age: timedelta) -> None:
        self._store = store
        self._max_age = max_age

    @property
    def max_age(self) -> timedelta:
        return self._max_age

    async def run(self) -> int:
        """Sweep once. Returns the number of sessions removed."""
        try:
            removed = self._store.sweep(self._max_age)
        except Exception as e:
            logger.error("session_sweep_failed", error=str(e))
            return 0
        logger.info(
            "session_sweep_completed",
            removed=removed,
            remaining=len(self._store),
            max_age_hours=self._max_age.total_seconds() / 3600,
        )
        return removed
