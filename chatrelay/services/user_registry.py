# chatrelay/services/user_registry.py

from __future__ import annotations

from typing import List, Optional
import logging

from chatrelay.core.errors import NameConflictError
from chatrelay.models.models import User

logger = logging.getLogger(__name__)

# ============================================================================
# IN-MEMORY USER REGISTRY
# ============================================================================

class UserRegistry:
    """
    Tracks the users currently joined to a room, keyed by connection id.

    The registry is the only owner of the user list. Rooms are not stored
    separately: a room is simply the set of users sharing a ``room`` value.

    Usernames are unique case-insensitively across *all* rooms, and a name
    is released as soon as its owner leaves.

    Concurrency:
        Every method is synchronous and never awaits, so on the asyncio
        event loop each call runs to completion before another connection's
        handler can touch the list.

    Usage:
        registry = UserRegistry()
        user = registry.join("conn-1", "alice", "lobby")
        registry.list_by_room("lobby")  # [user]
        registry.leave("conn-1")        # user
    """

    def __init__(self) -> None:
        # Registration order is kept so rosters come out stable
        self.users: List[User] = []

    def __len__(self) -> int:
        return len(self.users)

    def join(self, connection_id: str, username: str, room: str) -> User:
        """
        Register a user for a connection.

        Args:
            connection_id: Transport-assigned id of the connection
            username: Requested display name
            room: Room to place the user in

        Returns:
            User: The newly registered user

        Raises:
            NameConflictError: Another active user already has this name
                (compared case-insensitively). Nothing is stored.
        """
        wanted = username.lower()
        if any(u.username.lower() == wanted for u in self.users):
            raise NameConflictError()

        user = User(id=connection_id, username=username, room=room)
        self.users.append(user)
        logger.debug("Registered %s in '%s' (%d users)", username, room, len(self.users))
        return user

    def find(self, connection_id: str) -> Optional[User]:
        """Return the user registered for a connection, or None."""
        for user in self.users:
            if user.id == connection_id:
                return user
        return None

    def leave(self, connection_id: str) -> Optional[User]:
        """
        Remove and return the user registered for a connection.

        Returns None when the connection never joined or already left.
        """
        for index, user in enumerate(self.users):
            if user.id == connection_id:
                return self.users.pop(index)
        return None

    def list_by_room(self, room: str) -> List[User]:
        """Users in a room, in the order they joined."""
        return [u for u in self.users if u.room == room]

    def rooms(self) -> List[str]:
        """Names of rooms with at least one member, first-joined first."""
        seen: List[str] = []
        for user in self.users:
            if user.room not in seen:
                seen.append(user.room)
        return seen
