"""Pydantic schemas and enums."""

from .room import ConnectOptions, RoomSelection
from .room_state import RoomState

__all__ = [
    "ConnectOptions",
    "RoomSelection",
    "RoomState",
]
