"""Room session core.

Top-level API:
- `SessionController`: join a room and keep the participants view in sync
- `RoomSession`: handle for a joined room

Building blocks:
- `TrackBinder`: attach/detach one track's renderable handles
- `PublicationWatcher`: one publication's subscribe/unsubscribe lifecycle
- `ParticipantWatcher`: one participant's current and future publications
"""

from quickroom.domain.room.one_shot import OneShot
from quickroom.domain.room.participant_watcher import ParticipantWatcher
from quickroom.domain.room.publication_watcher import PublicationWatcher
from quickroom.domain.room.room_state_machine import RoomStateMachine
from quickroom.domain.room.session_controller import RoomSession, SessionController
from quickroom.domain.room.termination import (
    ProcessTerminationSignals,
    TerminationSignal,
    detect_termination_signals,
)
from quickroom.domain.room.track_binder import TrackBinder

__all__ = [
    "OneShot",
    "ParticipantWatcher",
    "ProcessTerminationSignals",
    "PublicationWatcher",
    "RoomSession",
    "RoomStateMachine",
    "SessionController",
    "TerminationSignal",
    "TrackBinder",
    "detect_termination_signals",
]
