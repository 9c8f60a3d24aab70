"""LiveKit session source.

`rtc.Room` reports everything through room-level events
(`track_subscribed(track, publication, participant)` and friends). The room
core expects each participant and each publication to emit its own events, so
`LivekitSession` keeps one wrapper per remote participant / publication and
fans room events out to them.

Usage:
    source = LivekitRoomSource(url=livekit_service.url)
    session = await source.establish(token, ConnectOptions())
"""

from __future__ import annotations

from loguru import logger
from livekit import rtc

from quickroom.presentation.container import RenderableTrack
from quickroom.schemas import ConnectOptions
from quickroom.utils.app_errors import AppErrorCode, RoomConnectionError


class LivekitTrack(RenderableTrack):
    """RenderableTrack backed by an `rtc.Track`."""

    def __init__(self, track: rtc.Track) -> None:
        kind = "video" if track.kind == rtc.TrackKind.KIND_VIDEO else "audio"
        super().__init__(sid=track.sid, kind=kind)
        self.rtc_track = track


class LivekitPublication(rtc.EventEmitter[str]):
    """Emits `subscribed(track)` / `unsubscribed(track)` for one remote publication."""

    def __init__(self, publication: rtc.RemoteTrackPublication) -> None:
        super().__init__()
        self.sid = publication.sid
        self.rtc_publication = publication
        self.track: LivekitTrack | None = None
        if publication.track is not None:
            self.track = LivekitTrack(publication.track)


class LivekitParticipant(rtc.EventEmitter[str]):
    """Emits `track_published` / `track_unpublished` for one remote participant."""

    def __init__(self, participant: rtc.RemoteParticipant) -> None:
        super().__init__()
        self.identity = participant.identity
        self.rtc_participant = participant
        self.track_publications: dict[str, LivekitPublication] = {}
        for publication in participant.track_publications.values():
            self.track_publications[publication.sid] = LivekitPublication(publication)


class LivekitLocalParticipant:
    def __init__(self, participant: rtc.LocalParticipant) -> None:
        self.rtc_participant = participant
        self.video_tracks: list[LivekitTrack] = []


class LivekitSession(rtc.EventEmitter[str]):
    """Room wrapper emitting `participant_connected`, `participant_disconnected`, `disconnected`."""

    def __init__(self, room: rtc.Room) -> None:
        super().__init__()
        self._room = room
        self.local_participant = LivekitLocalParticipant(room.local_participant)
        self.remote_participants: dict[str, LivekitParticipant] = {}
        self._disconnected = False

        # Registered before `connect` so nothing emitted during the handshake is lost.
        room.on("participant_connected", self._on_participant_connected)
        room.on("participant_disconnected", self._on_participant_disconnected)
        room.on("track_published", self._on_track_published)
        room.on("track_unpublished", self._on_track_unpublished)
        room.on("track_subscribed", self._on_track_subscribed)
        room.on("track_unsubscribed", self._on_track_unsubscribed)
        room.on("disconnected", self._on_disconnected)

    @property
    def room(self) -> rtc.Room:
        return self._room

    def sync_participants(self) -> None:
        """Pick up participants that were already in the room when we connected."""
        for participant in self._room.remote_participants.values():
            self._get_or_create_participant(participant)

    async def publish_camera(self, width: int, height: int) -> LivekitTrack:
        source = rtc.VideoSource(width, height)
        track = rtc.LocalVideoTrack.create_video_track("camera", source)
        options = rtc.TrackPublishOptions(source=rtc.TrackSource.SOURCE_CAMERA)
        await self._room.local_participant.publish_track(track, options)

        local_track = LivekitTrack(track)
        self.local_participant.video_tracks.append(local_track)
        logger.info(f"Published local camera track: {track.sid} {width}x{height}")
        return local_track

    async def disconnect(self) -> None:
        if self._disconnected:
            return
        await self._room.disconnect()

    def _get_or_create_participant(self, participant: rtc.RemoteParticipant) -> LivekitParticipant:
        wrapper = self.remote_participants.get(participant.identity)
        if wrapper is None:
            wrapper = LivekitParticipant(participant)
            self.remote_participants[participant.identity] = wrapper
        return wrapper

    def _get_or_create_publication(
        self,
        publication: rtc.RemoteTrackPublication,
        participant: rtc.RemoteParticipant,
    ) -> tuple[LivekitPublication, bool]:
        owner = self._get_or_create_participant(participant)
        wrapper = owner.track_publications.get(publication.sid)
        if wrapper is not None:
            return wrapper, False
        wrapper = LivekitPublication(publication)
        owner.track_publications[publication.sid] = wrapper
        return wrapper, True

    def _on_participant_connected(self, participant: rtc.RemoteParticipant) -> None:
        logger.info(f"Participant connected: {participant.identity}")
        self.emit("participant_connected", self._get_or_create_participant(participant))

    def _on_participant_disconnected(self, participant: rtc.RemoteParticipant) -> None:
        logger.info(f"Participant disconnected: {participant.identity}")
        wrapper = self.remote_participants.pop(participant.identity, None)
        if wrapper is not None:
            self.emit("participant_disconnected", wrapper)

    def _on_track_published(
        self,
        publication: rtc.RemoteTrackPublication,
        participant: rtc.RemoteParticipant,
    ) -> None:
        wrapper, created = self._get_or_create_publication(publication, participant)
        if created:
            self.remote_participants[participant.identity].emit("track_published", wrapper)

    def _on_track_unpublished(
        self,
        publication: rtc.RemoteTrackPublication,
        participant: rtc.RemoteParticipant,
    ) -> None:
        owner = self.remote_participants.get(participant.identity)
        if owner is None:
            return
        wrapper = owner.track_publications.pop(publication.sid, None)
        if wrapper is not None:
            owner.emit("track_unpublished", wrapper)

    def _on_track_subscribed(
        self,
        track: rtc.Track,
        publication: rtc.RemoteTrackPublication,
        participant: rtc.RemoteParticipant,
    ) -> None:
        wrapper, created = self._get_or_create_publication(publication, participant)
        if created:
            # Publication seen for the first time: announce it, its watcher attaches the track.
            wrapper.track = LivekitTrack(track)
            self.remote_participants[participant.identity].emit("track_published", wrapper)
            return
        wrapper.track = LivekitTrack(track)
        wrapper.emit("subscribed", wrapper.track)

    def _on_track_unsubscribed(
        self,
        track: rtc.Track,
        publication: rtc.RemoteTrackPublication,
        participant: rtc.RemoteParticipant,
    ) -> None:
        owner = self.remote_participants.get(participant.identity)
        wrapper = owner.track_publications.get(publication.sid) if owner else None
        if wrapper is None or wrapper.track is None:
            return
        unbound, wrapper.track = wrapper.track, None
        wrapper.emit("unsubscribed", unbound)

    def _on_disconnected(self, reason: rtc.DisconnectReason | None = None) -> None:
        if self._disconnected:
            return
        self._disconnected = True
        self.emit("disconnected", reason)


class LivekitRoomSource:
    """Session source establishing rooms on a LiveKit server."""

    def __init__(self, url: str) -> None:
        self._url = url

    async def establish(self, credential: str, options: ConnectOptions | None = None) -> LivekitSession:
        options = options or ConnectOptions()
        room = rtc.Room()
        session = LivekitSession(room)

        logger.info(f"Connecting to LiveKit room at {self._url}")
        try:
            await room.connect(
                self._url,
                credential,
                options=rtc.RoomOptions(auto_subscribe=options.auto_subscribe),
            )
        except rtc.ConnectError as exc:
            raise RoomConnectionError(
                AppErrorCode.E_ROOM_CONNECT_FAILED, f"LiveKit connect failed: {exc}"
            ) from exc

        session.sync_participants()
        if options.publish_camera:
            try:
                await session.publish_camera(options.video_width, options.video_height)
            except Exception as exc:
                await room.disconnect()
                raise RoomConnectionError(
                    AppErrorCode.E_ROOM_CONNECT_FAILED, f"Failed to publish local camera: {exc}"
                ) from exc
        logger.info(f"Connected to room: {room.name}")
        return session
