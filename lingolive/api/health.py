"""Service status endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from lingolive import __version__
from lingolive.api.deps import get_agent_registry, get_session_store
from lingolive.realtime.agents import AgentRegistry
from lingolive.schemas.session import HealthResponse
from lingolive.store.sessions import SessionStore

router = APIRouter(tags=["health"])

SERVICE_NAME = "LingoLive Support Backend"


@router.get("/", response_model=HealthResponse)
@router.get("/health", response_model=HealthResponse)
async def health_check(
    store: SessionStore = Depends(get_session_store),
    agents: AgentRegistry = Depends(get_agent_registry),
) -> HealthResponse:
    return HealthResponse(
        service=SERVICE_NAME,
        status="running",
        version=__version__,
        sessions=len(store),
        agents=len(agents),
        timestamp=datetime.now(timezone.utc),
    )
