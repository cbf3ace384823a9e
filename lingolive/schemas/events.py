"""Realtime protocol events.

Frames are flat JSON objects discriminated on ``type`` with camelCase keys,
e.g. ``{"type": "send-message", "sessionId": "...", "text": "Hi"}``.

Inbound events are closed unions per connection role: a widget can only send
``WidgetEvent`` members and an agent only ``AgentEvent`` members. Anything
else fails validation and is answered with an ``error`` event.
"""

from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import Field, TypeAdapter

from lingolive.schemas.session import CamelModel, MessageOut, SessionOut


# ---------------------------------------------------------------------------
# Inbound: widget → server
# ---------------------------------------------------------------------------


class JoinEvent(CamelModel):
    type: Literal["join"]
    session_id: str


class SetLanguageEvent(CamelModel):
    type: Literal["set-language"]
    lang: str


class WidgetSendMessageEvent(CamelModel):
    type: Literal["send-message"]
    text: str
    lang: str | None = None


class WidgetTypingStartEvent(CamelModel):
    type: Literal["typing-start"]


class WidgetTypingStopEvent(CamelModel):
    type: Literal["typing-stop"]


WidgetEvent = Annotated[
    Union[
        JoinEvent,
        SetLanguageEvent,
        WidgetSendMessageEvent,
        WidgetTypingStartEvent,
        WidgetTypingStopEvent,
    ],
    Field(discriminator="type"),
]


# ---------------------------------------------------------------------------
# Inbound: agent → server
# ---------------------------------------------------------------------------


class RegisterEvent(CamelModel):
    type: Literal["register"]


class HistoryRequestEvent(CamelModel):
    type: Literal["history-request"]
    session_id: str


class AgentSendMessageEvent(CamelModel):
    type: Literal["send-message"]
    session_id: str
    text: str


class AgentTypingStartEvent(CamelModel):
    type: Literal["typing-start"]
    session_id: str


class AgentTypingStopEvent(CamelModel):
    type: Literal["typing-stop"]
    session_id: str


class DeleteSessionEvent(CamelModel):
    type: Literal["delete-session"]
    session_id: str


AgentEvent = Annotated[
    Union[
        RegisterEvent,
        HistoryRequestEvent,
        AgentSendMessageEvent,
        AgentTypingStartEvent,
        AgentTypingStopEvent,
        DeleteSessionEvent,
    ],
    Field(discriminator="type"),
]

WIDGET_EVENTS = TypeAdapter(WidgetEvent)
AGENT_EVENTS = TypeAdapter(AgentEvent)


# ---------------------------------------------------------------------------
# Outbound: server → connections
# ---------------------------------------------------------------------------


class SessionJoinedEvent(CamelModel):
    type: Literal["session-joined"] = "session-joined"
    session_id: str
    user_lang: str
    timestamp: datetime


class MessageHistoryEvent(CamelModel):
    type: Literal["message-history"] = "message-history"
    session_id: str
    messages: list[MessageOut]


class LanguageUpdatedEvent(CamelModel):
    type: Literal["language-updated"] = "language-updated"
    lang: str


class MessageSentEvent(CamelModel):
    type: Literal["message-sent"] = "message-sent"
    session_id: str
    message_id: str
    text: str
    translated_text: str
    timestamp: datetime


class UserMessageEvent(CamelModel):
    """Widget message as delivered to agents (in the agent language)."""

    type: Literal["user-message"] = "user-message"
    session_id: str
    message_id: str
    text: str
    original_text: str
    original_lang: str
    timestamp: datetime


class AgentMessageEvent(CamelModel):
    """Agent reply as delivered to the widget (in the user's language)."""

    type: Literal["agent-message"] = "agent-message"
    session_id: str
    message_id: str
    text: str
    timestamp: datetime


class UserTypingEvent(CamelModel):
    type: Literal["user-typing"] = "user-typing"
    session_id: str


class UserStoppedTypingEvent(CamelModel):
    type: Literal["user-stopped-typing"] = "user-stopped-typing"
    session_id: str


class AgentTypingEvent(CamelModel):
    type: Literal["agent-typing"] = "agent-typing"
    session_id: str


class AgentStoppedTypingEvent(CamelModel):
    type: Literal["agent-stopped-typing"] = "agent-stopped-typing"
    session_id: str


class SessionsListEvent(CamelModel):
    type: Literal["sessions-list"] = "sessions-list"
    sessions: list[SessionOut]


class SessionHistoryEvent(CamelModel):
    type: Literal["session-history"] = "session-history"
    session_id: str
    messages: list[MessageOut]


class NewSessionEvent(CamelModel):
    type: Literal["new-session"] = "new-session"
    session: SessionOut


class SessionEndedEvent(CamelModel):
    type: Literal["session-ended"] = "session-ended"
    session_id: str


class SessionDeletedEvent(CamelModel):
    type: Literal["session-deleted"] = "session-deleted"
    session_id: str


class ErrorEvent(CamelModel):
    type: Literal["error"] = "error"
    code: str
    message: str


OutboundEvent = Union[
    SessionJoinedEvent,
    MessageHistoryEvent,
    LanguageUpdatedEvent,
    MessageSentEvent,
    UserMessageEvent,
    AgentMessageEvent,
    UserTypingEvent,
    UserStoppedTypingEvent,
    AgentTypingEvent,
    AgentStoppedTypingEvent,
    SessionsListEvent,
    SessionHistoryEvent,
    NewSessionEvent,
    SessionEndedEvent,
    SessionDeletedEvent,
    ErrorEvent,
]
