"""Fake room collaborators and fixtures for room core tests."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable

import pytest
from livekit import rtc

from quickroom.domain.room.termination import TerminationSignal
from quickroom.domain.room.track_binder import TrackBinder
from quickroom.presentation import LeaveButton, ParticipantsContainer, RenderableTrack


class FakePublication(rtc.EventEmitter[str]):
    def __init__(self, sid: str, track: RenderableTrack | None = None) -> None:
        super().__init__()
        self.sid = sid
        self.track = track

    def subscribe(self, track: RenderableTrack) -> None:
        self.track = track
        self.emit("subscribed", track)

    def unsubscribe(self) -> None:
        track, self.track = self.track, None
        self.emit("unsubscribed", track)


class FakeParticipant(rtc.EventEmitter[str]):
    def __init__(self, identity: str, publications: list[FakePublication] | None = None) -> None:
        super().__init__()
        self.identity = identity
        self.track_publications = {p.sid: p for p in publications or []}

    def publish(self, publication: FakePublication) -> None:
        self.track_publications[publication.sid] = publication
        self.emit("track_published", publication)

    def unpublish(self, sid: str) -> None:
        publication = self.track_publications.pop(sid)
        self.emit("track_unpublished", publication)


class FakeLocalParticipant:
    def __init__(self, video_tracks: list[RenderableTrack] | None = None) -> None:
        self.video_tracks = list(video_tracks or [])


class FakeSession(rtc.EventEmitter[str]):
    def __init__(
        self,
        local_tracks: list[RenderableTrack] | None = None,
        participants: list[FakeParticipant] | None = None,
    ) -> None:
        super().__init__()
        self.local_participant = FakeLocalParticipant(local_tracks)
        self.remote_participants = {p.identity: p for p in participants or []}
        self.disconnect_calls = 0
        self._disconnected = False

    def connect_participant(self, participant: FakeParticipant) -> None:
        self.remote_participants[participant.identity] = participant
        self.emit("participant_connected", participant)

    def disconnect_participant(self, identity: str) -> None:
        participant = self.remote_participants.pop(identity)
        self.emit("participant_disconnected", participant)

    def drop(self, reason: str = "remote") -> None:
        """Server side disconnect."""
        if self._disconnected:
            return
        self._disconnected = True
        self.emit("disconnected", reason)

    async def disconnect(self) -> None:
        self.disconnect_calls += 1
        self.drop("client_initiated")


class FakeSessionSource:
    def __init__(self, session: FakeSession | None = None, error: Exception | None = None) -> None:
        self.session = session
        self.error = error
        self.calls: list[tuple[str, object]] = []

    async def establish(self, credential: str, options: object) -> FakeSession:
        self.calls.append((credential, options))
        if self.error is not None:
            raise self.error
        assert self.session is not None
        return self.session


class FakeTerminationSignals:
    def __init__(self, available: set[TerminationSignal] | None = None) -> None:
        self._available = set(available or set())
        self.callbacks: dict[TerminationSignal, list[Callable[[], None]]] = defaultdict(list)

    def available(self) -> set[TerminationSignal]:
        return set(self._available)

    def subscribe(self, kind: TerminationSignal, callback: Callable[[], None]) -> None:
        self.callbacks[kind].append(callback)

    def unsubscribe(self, kind: TerminationSignal, callback: Callable[[], None]) -> None:
        self.callbacks[kind].remove(callback)

    def fire(self, kind: TerminationSignal) -> None:
        for callback in list(self.callbacks[kind]):
            callback()


class RecordingBinder(TrackBinder):
    """TrackBinder that records every attach/detach it performs."""

    def __init__(self) -> None:
        self.attached: list[RenderableTrack] = []
        self.detached: list[RenderableTrack] = []

    def attach(self, track, sink) -> None:
        self.attached.append(track)
        super().attach(track, sink)

    def detach(self, track) -> None:
        self.detached.append(track)
        super().detach(track)


@pytest.fixture
def container() -> ParticipantsContainer:
    return ParticipantsContainer()


@pytest.fixture
def binder() -> RecordingBinder:
    return RecordingBinder()


@pytest.fixture
def leave_button() -> LeaveButton:
    return LeaveButton()


@pytest.fixture
def local_track() -> RenderableTrack:
    return RenderableTrack(sid="TR_local_camera")
