# chatrelay/api/routes/health.py
from datetime import datetime, timezone

from fastapi import APIRouter

from chatrelay.core import state

router = APIRouter()

@router.get("/health")
async def health():
    """
    Health check endpoint.

    Returns current system status, connection counts, and room counts.

    Returns:
        dict: Status, open connections, joined users, active rooms,
              chat messages relayed since start, uptime
    """
    uptime_seconds = (datetime.now(timezone.utc) - state.app_start_time).total_seconds()
    return {
        "status": "healthy",
        "connections": len(state.connection_manager.connections),
        "users": len(state.user_registry),
        "active_rooms": len(state.user_registry.rooms()),
        "messages_relayed": state.chat_handler.message_counter,
        "uptime_seconds": round(uptime_seconds, 2),
    }
