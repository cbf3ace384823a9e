"""In-memory session and message records."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class Sender(str, Enum):
    USER = "user"
    AGENT = "agent"


@dataclass
class Session:
    """One end-user conversation.

    ``session_id`` and ``created_at`` never change after creation.
    ``last_activity`` only moves forward.
    """

    session_id: str
    site_key: str
    user_lang: str
    created_at: datetime
    last_activity: datetime
    connection_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Message:
    """A single chat message. Immutable once appended."""

    id: str
    session_id: str
    sender: Sender
    original_text: str
    translated_text: str
    original_lang: str
    target_lang: str
    timestamp: datetime
