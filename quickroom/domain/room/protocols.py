"""Capabilities the room core consumes from its collaborators.

Emitters follow the `livekit.rtc.EventEmitter` surface (`on` / `off`), so the
LiveKit adapter and the test fakes can both plug in.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any, Protocol


class Emitter(Protocol):
    def on(self, event: str, callback: Callable | None = None) -> Callable: ...

    def off(self, event: str, callback: Callable) -> None: ...


class RenderableHandle(Protocol):
    style: dict[str, str]

    def remove(self) -> None: ...


class Track(Protocol):
    def attach(self) -> RenderableHandle: ...

    def detach(self) -> Sequence[RenderableHandle]: ...


class Sink(Protocol):
    def append(self, handle: RenderableHandle) -> None: ...


class Publication(Emitter, Protocol):
    """Emits `subscribed(track)` and `unsubscribed(track)`."""

    sid: str
    track: Track | None


class Participant(Emitter, Protocol):
    """Emits `track_published(publication)` and `track_unpublished(publication)`."""

    identity: str
    track_publications: Mapping[str, Publication]


class LocalParticipant(Protocol):
    video_tracks: Sequence[Track]


class Session(Emitter, Protocol):
    """Emits `participant_connected`, `participant_disconnected` and `disconnected` (at most once)."""

    local_participant: LocalParticipant
    remote_participants: Mapping[str, Participant]

    async def disconnect(self) -> None: ...


class SessionSource(Protocol):
    async def establish(self, credential: str, options: Any) -> Session: ...


class LeaveControl(Emitter, Protocol):
    """Emits `activate` when the user asks to leave."""
