"""Common enums used across schemas."""

from enum import Enum


class RoomState(str, Enum):
    """Room session lifecycle states.

    State Transition Flow:

    CONNECTING → CONNECTED → DISCONNECTED
        ↓
    DISCONNECTED

    State Descriptions:
    - CONNECTING: Room established by the session source, local preview and
      watchers not wired yet.
    - CONNECTED: Local preview attached, participant watchers and disconnect
      triggers wired.
    - DISCONNECTED: The room reported `disconnected`. Local preview detached,
      watchers disposed.

    Terminal states (no further transitions): DISCONNECTED
    """

    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"

    def __str__(self) -> str:
        return self.value


__all__ = ["RoomState"]
