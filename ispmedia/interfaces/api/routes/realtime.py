"""Websocket endpoint that pushes notifications to registered users."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from ispmedia.infrastructure.realtime import Connection, RealtimeHub

router = APIRouter(tags=["realtime"])
logger = logging.getLogger(__name__)


def _parse_user_id(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        user_id = int(value)
    except (TypeError, ValueError):
        return None
    return user_id if user_id > 0 else None


@router.websocket("/ws")
async def realtime_websocket(websocket: WebSocket) -> None:
    """Keep a realtime channel open and bind it to the user it registers.

    Clients send ``{"type": "register_user", "user_id": <id>}`` once connected
    and then receive ``{"type": "notification", "data": {...}}`` pushes.
    """

    hub: RealtimeHub = websocket.app.state.realtime

    await websocket.accept()
    connection = Connection.open(websocket)
    hub.on_connection_open(connection)
    try:
        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except (ValueError, TypeError, KeyError):
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
                continue

            if message_type == "register_user":
                user_id = _parse_user_id(message.get("user_id"))
                if user_id is None:
                    await websocket.send_json(
                        {"type": "error", "data": {"detail": "Identificador de utilizador inválido"}}
                    )
                    continue
                hub.on_user_register(user_id, connection)
                await websocket.send_json({"type": "registered", "data": {"user_id": user_id}})
                continue

            logger.debug("Ignoring realtime message of type %r", message_type)
    except WebSocketDisconnect:
        pass
    finally:
        hub.on_connection_close(connection)
