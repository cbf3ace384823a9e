"""Realtime event routing between widget and agent connections.

Connection lifecycle:
    authenticate() → connect() → dispatch()* → disconnect()

A widget connection is bound to the session named in its token. An agent
connection is unbound and addresses sessions by id. Every inbound frame is
validated into a typed event and handled to completion before the next
frame from the same connection is read. Failures become a single ``error``
event to the originating connection only.

Handlers that translate follow one rule: await the translation on plain
text first, then mutate the store in one synchronous call, then send.
"""

import json
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

import structlog
from pydantic import ValidationError

from lingolive.core.exceptions import (
    AuthenticationRequiredError,
    EmptyMessageError,
    LingoLiveError,
    MalformedEventError,
    SessionMismatchError,
    SessionNotFoundError,
    UnsupportedLanguageError,
)
from lingolive.core.security import decode_session_token
from lingolive.models.session import Sender
from lingolive.realtime.agents import AgentRegistry
from lingolive.realtime.hub import ConnectionHub, EventSink
from lingolive.schemas.events import (
    AGENT_EVENTS,
    WIDGET_EVENTS,
    AgentMessageEvent,
    AgentSendMessageEvent,
    AgentStoppedTypingEvent,
    AgentTypingEvent,
    AgentTypingStartEvent,
    AgentTypingStopEvent,
    DeleteSessionEvent,
    ErrorEvent,
    HistoryRequestEvent,
    JoinEvent,
    LanguageUpdatedEvent,
    MessageHistoryEvent,
    MessageSentEvent,
    NewSessionEvent,
    RegisterEvent,
    SessionDeletedEvent,
    SessionEndedEvent,
    SessionHistoryEvent,
    SessionJoinedEvent,
    SessionsListEvent,
    SetLanguageEvent,
    UserMessageEvent,
    UserStoppedTypingEvent,
    UserTypingEvent,
    WidgetSendMessageEvent,
    WidgetTypingStartEvent,
    WidgetTypingStopEvent,
)
from lingolive.schemas.session import MessageOut, SessionOut
from lingolive.services.language.normalizer import normalize_lang
from lingolive.services.translation.resolver import TranslationResolver
from lingolive.store.sessions import SessionStore

logger = structlog.get_logger(__name__)

AGENT_CLIENT_TYPE = "agent"


class ConnectionRole(str, Enum):
    WIDGET = "widget"
    AGENT = "agent"


@dataclass
class Connection:
    """An authenticated realtime connection."""

    connection_id: str
    role: ConnectionRole
    session_id: str | None = None
    site_key: str | None = None

    @property
    def is_agent(self) -> bool:
        return self.role is ConnectionRole.AGENT


class ConnectionRouter:
    """Dispatches realtime events to the store, resolver and peer connections."""

    def __init__(
        self,
        store: SessionStore,
        resolver: TranslationResolver,
        hub: ConnectionHub,
        agents: AgentRegistry,
    ) -> None:
        self._store = store
        self._resolver = resolver
        self._hub = hub
        self._agents = agents
        self._widget_handlers = {
            JoinEvent: self._handle_join,
            SetLanguageEvent: self._handle_set_language,
            WidgetSendMessageEvent: self._handle_user_message,
            WidgetTypingStartEvent: self._handle_user_typing,
            WidgetTypingStopEvent: self._handle_user_typing,
        }
        self._agent_handlers = {
            RegisterEvent: self._handle_register,
            HistoryRequestEvent: self._handle_history_request,
            AgentSendMessageEvent: self._handle_agent_message,
            AgentTypingStartEvent: self._handle_agent_typing,
            AgentTypingStopEvent: self._handle_agent_typing,
            DeleteSessionEvent: self._handle_delete_session,
        }

    @property
    def store(self) -> SessionStore:
        return self._store

    @property
    def agents(self) -> AgentRegistry:
        return self._agents

    @property
    def hub(self) -> ConnectionHub:
        return self._hub

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def authenticate(self, token: str | None, client_type: str | None = None) -> Connection:
        """Resolve handshake parameters into a connection.

        Agents are accepted on their declared client type. Widgets must
        present a valid session token.

        Raises:
            AuthenticationRequiredError: Widget connection without a token.
            InvalidSessionTokenError: Token fails verification.
        """
        connection_id = str(uuid.uuid4())
        if client_type == AGENT_CLIENT_TYPE:
            return Connection(connection_id=connection_id, role=ConnectionRole.AGENT)

        if not token:
            raise AuthenticationRequiredError()
        claims = decode_session_token(token)
        return Connection(
            connection_id=connection_id,
            role=ConnectionRole.WIDGET,
            session_id=claims["sessionId"],
            site_key=claims["siteKey"],
        )

    def connect(self, connection: Connection, sink: EventSink) -> None:
        self._hub.attach(connection.connection_id, sink)
        logger.info(
            "connection_opened",
            connection_id=connection.connection_id,
            role=connection.role.value,
            session_id=connection.session_id,
        )

    async def disconnect(self, connection: Connection) -> None:
        """Tear down a connection. Sessions are retained for reconnection."""
        self._hub.detach(connection.connection_id)
        logger.info(
            "connection_closed",
            connection_id=connection.connection_id,
            role=connection.role.value,
            session_id=connection.session_id,
        )

        if connection.is_agent:
            self._agents.unregister(connection.connection_id)
            return

        if self._store.unbind_connection(connection.session_id, connection.connection_id):
            await self._hub.broadcast(
                self._agents.list_all(),
                SessionEndedEvent(session_id=connection.session_id),
            )

    async def dispatch(self, connection: Connection, raw: str | bytes) -> None:
        """Parse, validate and handle one inbound frame."""
        try:
            event = self._parse(connection, raw)
            handlers = self._agent_handlers if connection.is_agent else self._widget_handlers
            await handlers[type(event)](connection, event)
        except LingoLiveError as e:
            logger.info(
                "event_rejected",
                connection_id=connection.connection_id,
                code=e.code,
                message=e.message,
            )
            await self._hub.send(
                connection.connection_id,
                ErrorEvent(code=e.code, message=e.message),
            )
        except Exception as e:
            logger.error(
                "event_handler_failed",
                connection_id=connection.connection_id,
                role=connection.role.value,
                error=str(e),
                exc_info=True,
            )
            await self._hub.send(
                connection.connection_id,
                ErrorEvent(code="INTERNAL_ERROR", message="Failed to process event"),
            )

    def _parse(self, connection: Connection, raw: str | bytes):
        try:
            payload = json.loads(raw)
        except (TypeError, ValueError) as e:
            raise MalformedEventError("Event is not valid JSON") from e
        if not isinstance(payload, dict):
            raise MalformedEventError("Event must be a JSON object")

        adapter = AGENT_EVENTS if connection.is_agent else WIDGET_EVENTS
        try:
            return adapter.validate_python(payload)
        except ValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first["loc"])
            detail = f"{location}: {first['msg']}" if location else first["msg"]
            raise MalformedEventError(f"Invalid {payload.get('type', 'event')!s} event: {detail}") from e

    # ------------------------------------------------------------------
    # Widget events
    # ------------------------------------------------------------------

    async def _handle_join(self, connection: Connection, event: JoinEvent) -> None:
        if event.session_id != connection.session_id:
            raise SessionMismatchError()

        session, recreated = self._store.restore(connection.session_id, connection.site_key)
        self._store.bind_connection(session.session_id, connection.connection_id)
        history = self._store.list(session.session_id)
        logger.info(
            "session_joined",
            session_id=session.session_id,
            connection_id=connection.connection_id,
            recreated=recreated,
            history=len(history),
        )

        await self._hub.send(
            connection.connection_id,
            SessionJoinedEvent(
                session_id=session.session_id,
                user_lang=session.user_lang,
                timestamp=datetime.now(timezone.utc),
            ),
        )
        await self._hub.send(
            connection.connection_id,
            MessageHistoryEvent(
                session_id=session.session_id,
                messages=[MessageOut.from_message(m) for m in history],
            ),
        )
        await self._hub.broadcast(
            self._agents.list_all(),
            NewSessionEvent(session=SessionOut.from_session(session)),
        )

    async def _handle_set_language(self, connection: Connection, event: SetLanguageEvent) -> None:
        lang = normalize_lang(event.lang, fallback=None)
        if lang is None:
            raise UnsupportedLanguageError()
        if not self._store.update(connection.session_id, user_lang=lang):
            raise SessionNotFoundError()

        logger.info("session_language_set", session_id=connection.session_id, lang=lang)
        await self._hub.send(connection.connection_id, LanguageUpdatedEvent(lang=lang))

    async def _handle_user_message(self, connection: Connection, event: WidgetSendMessageEvent) -> None:
        if not event.text.strip():
            raise EmptyMessageError()
        session = self._store.get(connection.session_id)
        if session is None:
            raise SessionNotFoundError()

        user_lang = normalize_lang(event.lang or session.user_lang)
        logger.info(
            "user_message_received",
            session_id=session.session_id,
            lang=user_lang,
            text=event.text[:50],
        )

        translated = await self._resolver.user_to_agent(event.text, user_lang)
        message = self._store.append(
            session.session_id,
            sender=Sender.USER,
            original_text=event.text,
            translated_text=translated,
            original_lang=user_lang,
            target_lang=self._resolver.agent_language,
        )
        if message is None:
            raise SessionNotFoundError()

        await self._hub.send(
            connection.connection_id,
            MessageSentEvent(
                session_id=message.session_id,
                message_id=message.id,
                text=message.original_text,
                translated_text=message.translated_text,
                timestamp=message.timestamp,
            ),
        )
        delivered = await self._hub.broadcast(
            self._agents.list_all(),
            UserMessageEvent(
                session_id=message.session_id,
                message_id=message.id,
                text=message.translated_text,
                original_text=message.original_text,
                original_lang=message.original_lang,
                timestamp=message.timestamp,
            ),
        )
        logger.debug("user_message_fanned_out", session_id=message.session_id, agents=delivered)

    async def _handle_user_typing(
        self,
        connection: Connection,
        event: WidgetTypingStartEvent | WidgetTypingStopEvent,
    ) -> None:
        if isinstance(event, WidgetTypingStartEvent):
            notice = UserTypingEvent(session_id=connection.session_id)
        else:
            notice = UserStoppedTypingEvent(session_id=connection.session_id)
        await self._hub.broadcast(self._agents.list_all(), notice)

    # ------------------------------------------------------------------
    # Agent events
    # ------------------------------------------------------------------

    async def _handle_register(self, connection: Connection, event: RegisterEvent) -> None:
        self._agents.register(connection.connection_id)
        sessions = self._store.list_sessions()
        await self._hub.send(
            connection.connection_id,
            SessionsListEvent(sessions=[SessionOut.from_session(s) for s in sessions]),
        )

    async def _handle_history_request(self, connection: Connection, event: HistoryRequestEvent) -> None:
        if event.session_id not in self._store:
            raise SessionNotFoundError()
        messages = self._store.list(event.session_id)
        await self._hub.send(
            connection.connection_id,
            SessionHistoryEvent(
                session_id=event.session_id,
                messages=[MessageOut.from_message(m) for m in messages],
            ),
        )

    async def _handle_agent_message(self, connection: Connection, event: AgentSendMessageEvent) -> None:
        if not event.text.strip():
            raise EmptyMessageError()
        session = self._store.get(event.session_id)
        if session is None:
            raise SessionNotFoundError()

        user_lang = session.user_lang
        logger.info(
            "agent_message_received",
            session_id=session.session_id,
            connection_id=connection.connection_id,
            text=event.text[:50],
        )

        translated = await self._resolver.agent_to_user(event.text, user_lang)
        message = self._store.append(
            session.session_id,
            sender=Sender.AGENT,
            original_text=event.text,
            translated_text=translated,
            original_lang=self._resolver.agent_language,
            target_lang=user_lang,
        )
        if message is None:
            raise SessionNotFoundError()

        widget_id = session.connection_id
        delivered = await self._hub.send(
            widget_id,
            AgentMessageEvent(
                session_id=message.session_id,
                message_id=message.id,
                text=message.translated_text,
                timestamp=message.timestamp,
            ),
        )
        if not delivered:
            logger.info("agent_message_stored_offline", session_id=message.session_id)

        await self._hub.send(
            connection.connection_id,
            MessageSentEvent(
                session_id=message.session_id,
                message_id=message.id,
                text=message.original_text,
                translated_text=message.translated_text,
                timestamp=message.timestamp,
            ),
        )

    async def _handle_agent_typing(
        self,
        connection: Connection,
        event: AgentTypingStartEvent | AgentTypingStopEvent,
    ) -> None:
        session = self._store.get(event.session_id)
        if session is None:
            raise SessionNotFoundError()
        if isinstance(event, AgentTypingStartEvent):
            notice = AgentTypingEvent(session_id=session.session_id)
        else:
            notice = AgentStoppedTypingEvent(session_id=session.session_id)
        await self._hub.send(session.connection_id, notice)

    async def _handle_delete_session(self, connection: Connection, event: DeleteSessionEvent) -> None:
        session = self._store.get(event.session_id)
        if session is None:
            raise SessionNotFoundError()

        widget_id = session.connection_id
        self._store.delete(event.session_id)
        logger.info(
            "session_deleted_by_agent",
            session_id=event.session_id,
            connection_id=connection.connection_id,
        )

        notice = SessionDeletedEvent(session_id=event.session_id)
        await self._hub.send(widget_id, notice)
        await self._hub.broadcast(self._agents.list_all(), notice)
        if not self._agents.is_member(connection.connection_id):
            await self._hub.send(connection.connection_id, notice)
