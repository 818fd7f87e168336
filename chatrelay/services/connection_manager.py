# chatrelay/services/connection_manager.py

from __future__ import annotations

from typing import Dict, Iterable, Optional, Set
import logging
import secrets

from fastapi import WebSocket

logger = logging.getLogger(__name__)

# ============================================================================
# WEBSOCKET CONNECTION MANAGER
# ============================================================================

class ConnectionManager:
    """
    Manages live WebSocket connections and room broadcast groups.

    Each accepted socket gets a random connection id. Everything above this
    layer (the user registry, the chat event handler) refers to connections
    by that id only and never holds the socket itself.

    Data Structures:
        connections: Maps connection_id -> WebSocket
                     Example: {"3f9a...": websocket1}

        groups: Maps room -> Set of connection_ids subscribed to it
                Example: {"lobby": {"3f9a...", "b71c..."}}

        connection_groups: Maps connection_id -> Set of rooms it belongs to
                           Example: {"3f9a...": {"lobby"}}

    Delivery:
        Best effort. A send to a peer that has already gone away is logged
        and skipped; the sender is never told and nothing is retried. The
        dead peer is cleaned up by its own receive loop.
    """

    def __init__(self) -> None:
        """Initialize connection manager with empty data structures."""
        # Map: connection_id -> WebSocket
        self.connections: Dict[str, WebSocket] = {}

        # Map: room -> Set[connection_ids]
        self.groups: Dict[str, Set[str]] = {}

        # Map: connection_id -> Set[rooms]
        self.connection_groups: Dict[str, Set[str]] = {}

    async def connect(self, websocket: WebSocket) -> str:
        """
        Accept a new WebSocket connection and assign it an id.

        Returns:
            str: The connection id used for every later call

        Note:
            The connection is not in any group yet. It joins one once the
            client sends a successful ``joinRoom``.
        """
        await websocket.accept()

        connection_id = secrets.token_hex(10)
        self.connections[connection_id] = websocket
        self.connection_groups[connection_id] = set()

        logger.info("✓ Connection %s opened. Total: %d", connection_id, len(self.connections))
        return connection_id

    def disconnect(self, connection_id: str) -> None:
        """
        Forget a connection and remove it from every group.

        Empty groups are deleted. Calling this twice is harmless.
        """
        if connection_id not in self.connections:
            return

        for room in self.connection_groups.get(connection_id, set()):
            members = self.groups.get(room)
            if members is not None:
                members.discard(connection_id)
                if not members:
                    del self.groups[room]

        del self.connections[connection_id]
        self.connection_groups.pop(connection_id, None)

        logger.info("✗ Connection %s closed. Total: %d", connection_id, len(self.connections))

    def join_group(self, connection_id: str, room: str) -> None:
        """Subscribe a connection to a room's broadcasts."""
        if connection_id not in self.connections:
            return  # Connection already closed

        self.groups.setdefault(room, set()).add(connection_id)
        self.connection_groups[connection_id].add(room)

    def group_members(self, room: str) -> Set[str]:
        return set(self.groups.get(room, set()))

    async def send_personal(self, connection_id: str, message: dict) -> None:
        """Send a message to one connection only."""
        websocket = self.connections.get(connection_id)
        if websocket is None:
            return
        await self._send(connection_id, websocket, message)

    async def broadcast_to_room(
        self,
        room: str,
        message: dict,
        exclude: Optional[str] = None,
    ) -> None:
        """
        Broadcast a message to every connection subscribed to a room.

        Args:
            room: Target room name
            message: Message dict to send (will be JSON serialized)
            exclude: Connection id to leave out, typically the sender
        """
        if room not in self.groups:
            # No one subscribed to this room currently
            logger.debug("Skipped broadcast: room=%s has 0 subscribers", room)
            return

        targets = [cid for cid in self.groups[room].copy() if cid != exclude]
        logger.debug("📨 Broadcasting %s to room %s: %d clients", message.get("type"), room, len(targets))

        await self._send_many(targets, message)

    async def _send_many(self, connection_ids: Iterable[str], message: dict) -> None:
        for connection_id in connection_ids:
            websocket = self.connections.get(connection_id)
            if websocket is not None:
                await self._send(connection_id, websocket, message)

    async def _send(self, connection_id: str, websocket: WebSocket, message: dict) -> None:
        try:
            await websocket.send_json(message)
        except Exception as e:
            # Peer is gone; its receive loop will run the disconnect path
            logger.warning("Send to %s failed: %s", connection_id, e)
