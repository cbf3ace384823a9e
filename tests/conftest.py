"""Shared pytest fixtures for the LingoLive test suite.

Provides:
  - MockTranslationProvider: call-counting provider with canned responses
  - RecordingSink: in-memory connection sink collecting outbound events
  - store / agents / hub: fresh service objects per test
  - resolver: TranslationResolver over the default tiers and a mock provider
  - connection_router: ConnectionRouter wired to the fixtures above
  - widget_factory / agent_factory: authenticated, connected connections

All external translation calls are mocked in every test; no network access.
"""

from __future__ import annotations

import asyncio
import json
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from lingolive.core.exceptions import TranslationProviderError
from lingolive.core.security import create_session_token
from lingolive.realtime.agents import AgentRegistry
from lingolive.realtime.hub import ConnectionHub
from lingolive.realtime.router import Connection, ConnectionRouter
from lingolive.services.translation.cache import TranslationCache
from lingolive.services.translation.providers.base import TranslationProvider
from lingolive.services.translation.resolver import TranslationResolver, default_strategies
from lingolive.store.sessions import SessionStore

SITE_KEY = "PUBLIC_SITE_KEY_123"


# ---------------------------------------------------------------------------
# Mock translation provider
# ---------------------------------------------------------------------------


class MockTranslationProvider(TranslationProvider):
    """Mock provider for testing. Returns configurable responses.

    ``responses`` maps input text to output text. Unknown text raises
    ``TranslationProviderError`` unless ``default`` is set.
    """

    def __init__(
        self,
        responses: dict[str, str] | None = None,
        default: str | None = None,
        fail: bool = False,
        delay: float = 0.0,
    ) -> None:
        self._responses = responses or {}
        self._default = default
        self._fail = fail
        self._delay = delay
        self.calls: list[dict[str, str]] = []
        self.closed = False

    async def translate(self, text: str, source: str, target: str) -> str:
        self.calls.append({"text": text, "source": source, "target": target})
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._fail:
            raise TranslationProviderError("mock provider down")
        if text in self._responses:
            return self._responses[text]
        if self._default is not None:
            return self._default
        raise TranslationProviderError(f"no mock translation for {text!r}")

    async def aclose(self) -> None:
        self.closed = True


# ---------------------------------------------------------------------------
# Connection sinks
# ---------------------------------------------------------------------------


class RecordingSink:
    """Collects JSON-ready events sent to one connection."""

    def __init__(self, fail: bool = False) -> None:
        self.events: list[dict[str, Any]] = []
        self.fail = fail

    async def __call__(self, event: dict[str, Any]) -> None:
        if self.fail:
            raise RuntimeError("connection reset")
        # Frames go over the wire as JSON text
        json.dumps(event)
        self.events.append(event)

    def types(self) -> list[str]:
        return [e["type"] for e in self.events]

    def of_type(self, event_type: str) -> list[dict[str, Any]]:
        return [e for e in self.events if e["type"] == event_type]

    def last(self) -> dict[str, Any]:
        return self.events[-1]

    def clear(self) -> None:
        self.events.clear()


class FakeClock:
    """Settable clock for the session store."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


# ---------------------------------------------------------------------------
# Service fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> SessionStore:
    return SessionStore(default_language="en", clock=clock)


@pytest.fixture
def agents() -> AgentRegistry:
    return AgentRegistry()


@pytest.fixture
def hub() -> ConnectionHub:
    return ConnectionHub()


@pytest.fixture
def mock_provider() -> MockTranslationProvider:
    return MockTranslationProvider()


@pytest.fixture
def resolver(mock_provider: MockTranslationProvider) -> TranslationResolver:
    return TranslationResolver(
        default_strategies(mock_provider, timeout_seconds=1.0),
        cache=TranslationCache(),
        agent_language="en",
    )


@pytest.fixture
def connection_router(
    store: SessionStore,
    resolver: TranslationResolver,
    hub: ConnectionHub,
    agents: AgentRegistry,
) -> ConnectionRouter:
    return ConnectionRouter(store=store, resolver=resolver, hub=hub, agents=agents)


@pytest.fixture
def widget_factory(connection_router: ConnectionRouter, store: SessionStore):
    """Create a session and a connected widget for it.

    Returns ``(connection, sink)``. Pass ``session_id`` to open a second
    connection for an existing session.
    """

    def _make(session_id: str | None = None) -> tuple[Connection, RecordingSink]:
        if session_id is None:
            session_id = store.create(SITE_KEY).session_id
        token = create_session_token(session_id, SITE_KEY)
        connection = connection_router.authenticate(token, None)
        sink = RecordingSink()
        connection_router.connect(connection, sink)
        return connection, sink

    return _make


@pytest.fixture
def agent_factory(connection_router: ConnectionRouter):
    """Connected (not yet registered) agent connection: ``(connection, sink)``."""

    def _make(fail: bool = False) -> tuple[Connection, RecordingSink]:
        connection = connection_router.authenticate(None, "agent")
        sink = RecordingSink(fail=fail)
        connection_router.connect(connection, sink)
        return connection, sink

    return _make


def frame(**payload: Any) -> str:
    """Encode an inbound event as a JSON text frame."""
    return json.dumps(payload)
