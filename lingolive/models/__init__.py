"""In-memory domain models.

    from lingolive.models.session import Message, Sender, Session
"""

from lingolive.models.session import Message, Sender, Session

__all__ = [
    "Session",
    "Message",
    "Sender",
]
