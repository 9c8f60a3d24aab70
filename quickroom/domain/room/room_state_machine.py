"""Room state machine for managing state transitions."""

from quickroom.schemas import RoomState


class RoomStateMachine:
    """State machine for a joined room.

    State flow with triggers:
    - CONNECTING (session source established the room) -> CONNECTED | DISCONNECTED
    - CONNECTED (local preview attached, watchers wired) -> DISCONNECTED
    - DISCONNECTED (room emitted `disconnected`) is terminal
    """

    TRANSITIONS: dict[RoomState, set[RoomState]] = {
        RoomState.CONNECTING: {RoomState.CONNECTED, RoomState.DISCONNECTED},
        RoomState.CONNECTED: {RoomState.DISCONNECTED},
        RoomState.DISCONNECTED: set(),
    }

    TERMINAL_STATES: set[RoomState] = {RoomState.DISCONNECTED}

    @classmethod
    def can_transition(cls, current: RoomState, new: RoomState) -> bool:
        """Check if state transition is valid.

        Args:
            current: Current room state
            new: Target state to transition to

        Returns:
            True if transition is valid, False otherwise
        """
        return new in cls.TRANSITIONS.get(current, set())

    @classmethod
    def is_terminal(cls, state: RoomState) -> bool:
        return state in cls.TERMINAL_STATES

    @classmethod
    def get_valid_transitions(cls, state: RoomState) -> set[RoomState]:
        return cls.TRANSITIONS.get(state, set())

    @classmethod
    def get_valid_sources(cls, target: RoomState) -> set[RoomState]:
        """Get all states that can transition to the target state."""
        return {state for state, targets in cls.TRANSITIONS.items() if target in targets}
