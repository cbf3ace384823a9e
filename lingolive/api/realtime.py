"""WebSocket endpoint for widget and agent connections.

Handshake: ``/ws?token=<session token>`` for widgets or
``/ws?clientType=agent`` for agents. A failed handshake is closed with
policy-violation code 1008 before the socket is accepted.
"""

import structlog
from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect, status

from lingolive.api.deps import get_connection_router
from lingolive.core.exceptions import LingoLiveError
from lingolive.realtime.router import ConnectionRouter

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["realtime"])


@router.websocket("/ws")
async def realtime_socket(
    websocket: WebSocket,
    token: str | None = Query(None),
    client_type: str | None = Query(None, alias="clientType"),
    connections: ConnectionRouter = Depends(get_connection_router),
) -> None:
    try:
        connection = connections.authenticate(token, client_type)
    except LingoLiveError as e:
        logger.warning("websocket_auth_failed", code=e.code, client_type=client_type)
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason=e.message)
        return

    await websocket.accept()
    connections.connect(connection, websocket.send_json)
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", status.WS_1000_NORMAL_CLOSURE))
            # Text and binary frames both carry a JSON event
            raw = message.get("text") or message.get("bytes") or ""
            await connections.dispatch(connection, raw)
    except WebSocketDisconnect as e:
        logger.debug("websocket_disconnected", connection_id=connection.connection_id, code=e.code)
    finally:
        await connections.disconnect(connection)
