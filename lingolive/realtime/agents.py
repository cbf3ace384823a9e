"""Registry of agent connections that receive fan-out broadcasts."""

import structlog

logger = structlog.get_logger(__name__)


class AgentRegistry:
    """Registered agent connection ids, iterated in registration order."""

    def __init__(self) -> None:
        self._members: dict[str, None] = {}

    def register(self, connection_id: str) -> None:
        self._members[connection_id] = None
        logger.info("agent_registered", connection_id=connection_id, agents=len(self._members))

    def unregister(self, connection_id: str) -> bool:
        removed = self._members.pop(connection_id, False) is None
        if removed:
            logger.info("agent_unregistered", connection_id=connection_id, agents=len(self._members))
        return removed

    def list_all(self) -> list[str]:
        """Snapshot of members; safe to iterate while others (un)register."""
        return list(self._members)

    def is_member(self, connection_id: str) -> bool:
        return connection_id in self._members

    def __contains__(self, connection_id: object) -> bool:
        return connection_id in self._members

    def __len__(self) -> int:
        return len(self._members)
