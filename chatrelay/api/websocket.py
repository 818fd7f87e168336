# chatrelay/api/websocket.py

from __future__ import annotations

import json
import logging

import anyio
from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from chatrelay.core import state
from chatrelay.models.models import JoinRoomData
from chatrelay.services.chat_handler import ChatEventHandler

logger = logging.getLogger(__name__)

router = APIRouter()

# ============================================================================
# WEBSOCKET ENDPOINT
# ============================================================================

@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """
    WebSocket endpoint for real-time chat.

    Protocol:
    =========

    Client -> Server Actions:
    -------------------------
    Join Room:
        {"action": "joinRoom", "data": {"username": "alice", "room": "lobby"}}
        Response (private): welcome "message", then "roomUsers" to the room
        On name clash:      {"type": "usernameError", "message": "Username is already taken"}

    Chat Message:
        {"action": "chatMessage", "data": "hello"}
        Ignored until the connection has joined a room.

    Server -> Client Messages:
    -------------------------
    Message:
        {"type": "message", "username": "alice", "text": "hello", "time": "3:05 pm"}

    Room Roster:
        {"type": "roomUsers", "room": "lobby", "users": [{"id": "...", "username": "alice", "room": "lobby"}]}

    Error:
        {"type": "error", "message": "..."}

    Lifecycle:
    ==========
    1. Connection accepted and given a connection id
    2. Client sends "joinRoom" (may retry after a usernameError)
    3. Client sends any number of "chatMessage" actions
    4. On disconnect the user is removed and the room is told

    Error Handling:
        - Invalid JSON, unknown actions, bad payloads: error message, connection stays open
        - Connection errors: Cleanup and log
    """
    connection_id = await state.connection_manager.connect(websocket)
    handler = state.chat_handler

    try:
        while True:
            data = await websocket.receive_text()

            try:
                message = json.loads(data)
            except json.JSONDecodeError:
                await _send_error(connection_id, "Invalid JSON")
                continue

            if not isinstance(message, dict):
                await _send_error(connection_id, "Expected a JSON object")
                continue

            action = message.get("action")
            payload = message.get("data")
            logger.debug("Websocket input from %s: action=%s", connection_id, action)

            if action == "joinRoom":
                try:
                    join = JoinRoomData.model_validate(payload)
                except ValidationError:
                    await _send_error(connection_id, "joinRoom needs a username and a room")
                    continue
                await handler.join_room(connection_id, join.username, join.room)

            elif action == "chatMessage":
                if not isinstance(payload, str):
                    await _send_error(connection_id, "chatMessage needs text")
                    continue
                await handler.chat_message(connection_id, payload)

            else:
                await _send_error(connection_id, f"Unknown action: {action}")

    except WebSocketDisconnect:
        pass
    except Exception as e:
        logger.error("WebSocket error on %s: %s", connection_id, e)
    finally:
        await leave(handler, connection_id)


async def leave(handler: ChatEventHandler, connection_id: str) -> None:
    """
    Run the disconnect transition to completion.

    The server may cancel this connection's task while it is closing; the
    departure notice and the roster update must still both go out.
    """
    with anyio.CancelScope(shield=True):
        await handler.disconnect(connection_id)


async def _send_error(connection_id: str, text: str) -> None:
    logger.warning("Protocol error from %s: %s", connection_id, text)
    await state.connection_manager.send_personal(
        connection_id, {"type": "error", "message": text}
    )
