# chatrelay/models/models.py
from typing import List

from pydantic import BaseModel, ConfigDict


class User(BaseModel):
    """An active participant. Created on join, dropped on disconnect."""

    model_config = ConfigDict(frozen=True)

    id: str
    username: str
    room: str


class FormattedMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    username: str
    text: str
    time: str


class RoomUsers(BaseModel):
    room: str
    users: List[User]


class JoinRoomData(BaseModel):
    username: str
    room: str
