"""Shared FastAPI dependencies.

The store, agent registry, resolver and connection router are created once
during the FastAPI lifespan and stored on app.state. Routes retrieve them via
Depends(), never by direct import.
"""

from fastapi import Request, WebSocket

from lingolive.realtime.agents import AgentRegistry
from lingolive.realtime.router import ConnectionRouter
from lingolive.services.translation.resolver import TranslationResolver
from lingolive.store.sessions import SessionStore


# ---------------------------------------------------------------------------
# Service singletons, retrieved from app.state (set during lifespan)
# ---------------------------------------------------------------------------

def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def get_agent_registry(request: Request) -> AgentRegistry:
    return request.app.state.agent_registry


def get_translation_resolver(request: Request) -> TranslationResolver:
    return request.app.state.translation_resolver


def get_connection_router(websocket: WebSocket) -> ConnectionRouter:
    """WebSocket counterpart of the request-scoped getters above."""
    return websocket.app.state.connection_router
