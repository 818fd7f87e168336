# chatrelay/api/routes/rooms.py

from typing import List

from fastapi import APIRouter

from chatrelay.core import state
from chatrelay.models.models import RoomUsers

router = APIRouter()


@router.get("/rooms", response_model=List[RoomUsers])
async def list_rooms():
    """
    List the rooms that currently have members, with their rosters.

    Rooms exist only while someone is in them, so an empty list means
    nobody is chatting.
    """
    return [state.chat_handler.room_users(room) for room in state.user_registry.rooms()]
