from quickroom.presentation.container import (
    LeaveButton,
    MediaElement,
    ParticipantsContainer,
    RenderableTrack,
)
from quickroom.presentation.room_selector import RoomSelector

__all__ = [
    "LeaveButton",
    "MediaElement",
    "ParticipantsContainer",
    "RenderableTrack",
    "RoomSelector",
]
