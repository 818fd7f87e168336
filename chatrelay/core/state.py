# chatrelay/core/state.py
from __future__ import annotations

from datetime import datetime, timezone

from chatrelay.core.config import settings
from chatrelay.services.chat_handler import ChatEventHandler
from chatrelay.services.connection_manager import ConnectionManager
from chatrelay.services.user_registry import UserRegistry

# Global singletons for app state
user_registry = UserRegistry()
connection_manager = ConnectionManager()
chat_handler = ChatEventHandler(
    registry=user_registry,
    connections=connection_manager,
    bot_name=settings.BOT_NAME,
)

app_start_time: datetime = datetime.now(timezone.utc)
