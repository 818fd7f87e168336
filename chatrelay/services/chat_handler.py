# chatrelay/services/chat_handler.py

from __future__ import annotations

from typing import Optional
import logging

from chatrelay.core.errors import NameConflictError
from chatrelay.models.models import FormattedMessage, RoomUsers, User
from chatrelay.services.connection_manager import ConnectionManager
from chatrelay.services.messages import format_message
from chatrelay.services.user_registry import UserRegistry

logger = logging.getLogger(__name__)

WELCOME_TEXT = "Welcome to XeroxChat!"

# ============================================================================
# CHAT EVENT HANDLER
# ============================================================================

class ChatEventHandler:
    """
    Turns connection events into registry changes and broadcasts.

    A connection moves through three states:

        Connected-Unjoined --joinRoom--> Joined --disconnect--> Disconnected

    A failed ``joinRoom`` leaves it Unjoined so the client may retry.
    ``chatMessage`` from an Unjoined connection is ignored, as is a
    ``disconnect`` of a connection that never joined (no broadcast).

    Who hears what:
        welcome               -> the joiner only
        "<name> has joined"   -> the room, minus the joiner
        roster after a join   -> the whole room, joiner included
        chat message          -> the whole room, sender included
        "<name> has left"     -> the remaining room members
        roster after a leave  -> the remaining room members
    """

    def __init__(
        self,
        registry: UserRegistry,
        connections: ConnectionManager,
        bot_name: str = "XeroxChat Bot",
    ) -> None:
        self.registry = registry
        self.connections = connections
        self.bot_name = bot_name
        self.message_counter = 0

    async def join_room(self, connection_id: str, username: str, room: str) -> Optional[User]:
        """
        Handle ``joinRoom``.

        Returns:
            The registered user, or None when the name was taken (the
            requester has been sent a ``usernameError``).
        """
        if self.registry.find(connection_id) is not None:
            # Joined is only left by disconnecting
            await self.connections.send_personal(
                connection_id, {"type": "error", "message": "Already joined a room"}
            )
            return None

        try:
            user = self.registry.join(connection_id, username, room)
        except NameConflictError as e:
            logger.info("Name conflict for '%s' on %s", username, connection_id)
            await self.connections.send_personal(
                connection_id, {"type": "usernameError", "message": e.message}
            )
            return None

        self.connections.join_group(connection_id, user.room)
        logger.info("→ %s joined '%s' (%d members)",
                    user.username, user.room, len(self.registry.list_by_room(user.room)))

        await self.connections.send_personal(
            connection_id, self._message_frame(self._notice(WELCOME_TEXT))
        )
        await self.connections.broadcast_to_room(
            user.room,
            self._message_frame(self._notice(f"{user.username} has joined the chat!")),
            exclude=connection_id,
        )
        await self.connections.broadcast_to_room(user.room, self._roster_frame(user.room))
        return user

    async def chat_message(self, connection_id: str, text: str) -> None:
        """Handle ``chatMessage``: relay to the sender's whole room."""
        user = self.registry.find(connection_id)
        if user is None:
            return

        self.message_counter += 1
        await self.connections.broadcast_to_room(
            user.room, self._message_frame(format_message(user.username, text))
        )

    async def disconnect(self, connection_id: str) -> Optional[User]:
        """
        Handle the transport's ``disconnect``.

        The connection is dropped from its groups before anything is sent,
        so the departing client never receives its own departure notice.
        """
        user = self.registry.leave(connection_id)
        self.connections.disconnect(connection_id)

        if user is None:
            return None

        logger.info("← %s left '%s'", user.username, user.room)
        await self.connections.broadcast_to_room(
            user.room,
            self._message_frame(self._notice(f"{user.username} has left the chat!")),
        )
        await self.connections.broadcast_to_room(user.room, self._roster_frame(user.room))
        return user

    def room_users(self, room: str) -> RoomUsers:
        return RoomUsers(room=room, users=self.registry.list_by_room(room))

    def _notice(self, text: str) -> FormattedMessage:
        return format_message(self.bot_name, text)

    @staticmethod
    def _message_frame(message: FormattedMessage) -> dict:
        return {"type": "message", **message.model_dump()}

    def _roster_frame(self, room: str) -> dict:
        return {"type": "roomUsers", **self.room_users(room).model_dump()}
