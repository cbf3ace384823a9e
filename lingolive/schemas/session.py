"""Session, message and HTTP response schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from lingolive.models.session import Message, Session


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class SessionOut(CamelModel):
    """Session as shown to agents."""

    session_id: str
    site_key: str
    user_lang: str
    connected: bool
    created_at: datetime
    last_activity: datetime
    metadata: dict[str, Any] = {}

    @classmethod
    def from_session(cls, session: Session) -> "SessionOut":
        return cls(
            session_id=session.session_id,
            site_key=session.site_key,
            user_lang=session.user_lang,
            connected=session.connection_id is not None,
            created_at=session.created_at,
            last_activity=session.last_activity,
            metadata=dict(session.metadata),
        )


class MessageOut(CamelModel):
    """Single message in a history listing."""

    id: str
    session_id: str
    sender: str
    original_text: str
    translated_text: str
    original_lang: str
    target_lang: str
    timestamp: datetime

    @classmethod
    def from_message(cls, message: Message) -> "MessageOut":
        return cls(
            id=message.id,
            session_id=message.session_id,
            sender=message.sender.value,
            original_text=message.original_text,
            translated_text=message.translated_text,
            original_lang=message.original_lang,
            target_lang=message.target_lang,
            timestamp=message.timestamp,
        )


class AuthResponse(CamelModel):
    """GET /auth response body."""

    success: bool = True
    session_id: str
    session_token: str
    allowed_languages: list[str]
    default_language: str


class HealthResponse(CamelModel):
    """GET /health response body."""

    service: str
    status: str
    version: str
    sessions: int
    agents: int
    timestamp: datetime
