"""Room selection and connect option schemas."""

from pydantic import BaseModel, Field, field_validator


class RoomSelection(BaseModel):
    """What the user picked in the room selector.

    Attributes:
        identity: Screen name, used as the participant identity
        room_name: Name of the room to join
    """

    identity: str = Field(..., description="Screen name / participant identity")
    room_name: str = Field(..., description="Room to join")

    @field_validator("identity", "room_name")
    @classmethod
    def strip_and_require(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class ConnectOptions(BaseModel):
    """Options passed to the session source when establishing a room."""

    auto_subscribe: bool = True
    publish_camera: bool = True
    video_width: int = Field(default=1280, gt=0)
    video_height: int = Field(default=720, gt=0)


__all__ = ["ConnectOptions", "RoomSelection"]
