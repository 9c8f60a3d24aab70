"""Room session orchestration.

`SessionController.join()` establishes a room through a session source, shows
the local camera preview, keeps one ParticipantWatcher per remote participant
and wires the triggers that end the session. It hands back a `RoomSession`
that the caller owns and can await until the room is gone.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

from loguru import logger

from quickroom.domain.room.one_shot import OneShot
from quickroom.domain.room.participant_watcher import ParticipantWatcher
from quickroom.domain.room.protocols import (
    LeaveControl,
    Participant,
    Session,
    SessionSource,
    Sink,
    Track,
)
from quickroom.domain.room.room_state_machine import RoomStateMachine
from quickroom.domain.room.termination import (
    TerminationSignal,
    TerminationSignals,
    detect_termination_signals,
)
from quickroom.domain.room.track_binder import TrackBinder
from quickroom.schemas import RoomState
from quickroom.utils.app_errors import (
    AppError,
    AppErrorCode,
    PreconditionError,
    RoomConnectionError,
)


class RoomSession:
    """Handle for one joined room, returned by `SessionController.join()`."""

    def __init__(
        self,
        *,
        session: Session,
        sink: Sink,
        leave_control: LeaveControl,
        binder: TrackBinder,
        termination_signals: TerminationSignals | None = None,
    ) -> None:
        self.session = session
        self._sink = sink
        self._leave_control = leave_control
        self._binder = binder
        self._termination_signals = termination_signals

        self._state = RoomState.CONNECTING
        self._local_track: Track | None = None
        self._participant_watchers: dict[str, ParticipantWatcher] = {}
        self._signal_handlers: dict[TerminationSignal, Callable[[], None]] = {}
        self._disconnect_trigger: str | None = None
        self._leave_wired = False
        self._closed: OneShot[None] = OneShot()
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def state(self) -> RoomState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._closed.is_set

    @property
    def disconnect_trigger(self) -> str | None:
        """What asked for the disconnect: `leave`, `api`, a termination signal, or None."""
        return self._disconnect_trigger

    @property
    def local_track(self) -> Track | None:
        return self._local_track

    @property
    def participant_watchers(self) -> dict[str, ParticipantWatcher]:
        return dict(self._participant_watchers)

    def start(self) -> None:
        """Wire the room. Runs without suspending so no room event slips in between steps."""
        video_tracks = list(self.session.local_participant.video_tracks)
        if not video_tracks:
            raise PreconditionError(
                AppErrorCode.E_LOCAL_TRACK_MISSING,
                "No local video track available for the preview",
            )
        self._local_track = video_tracks[0]
        self._binder.attach(self._local_track, self._sink)

        for participant in list(self.session.remote_participants.values()):
            self._on_participant_connected(participant)
        self.session.on("participant_connected", self._on_participant_connected)
        self.session.on("participant_disconnected", self._on_participant_disconnected)

        self._leave_control.on("activate", self._on_leave)
        self._leave_wired = True
        for kind in detect_termination_signals(self._termination_signals):
            handler = self._make_signal_handler(kind)
            self._termination_signals.subscribe(kind, handler)
            self._signal_handlers[kind] = handler

        self.session.on("disconnected", self._on_disconnected)
        self._transition(RoomState.CONNECTED)

    def disconnect(self) -> None:
        """Ask the room to disconnect. Only the first request has any effect."""
        self._request_disconnect("api")

    async def wait_closed(self) -> None:
        """Resolve once the room has disconnected and the preview is torn down."""
        await self._closed.wait()

    def _make_signal_handler(self, kind: TerminationSignal) -> Callable[[], None]:
        def handler() -> None:
            self._request_disconnect(str(kind))

        return handler

    def _request_disconnect(self, trigger: str) -> None:
        if self._disconnect_trigger is not None or self.closed:
            return
        self._disconnect_trigger = trigger
        logger.info(f"Disconnecting from room: trigger={trigger}")

        task = asyncio.create_task(self.session.disconnect())
        self._tasks.add(task)
        task.add_done_callback(self._on_disconnect_done)

    def _on_disconnect_done(self, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        if task.cancelled() or task.exception() is None:
            return
        # The room will not report `disconnected` now, so tear down locally.
        logger.error(f"Room disconnect failed: {task.exception()}")
        self._on_disconnected("disconnect_failed")

    def _on_participant_connected(self, participant: Participant) -> None:
        if participant.identity in self._participant_watchers:
            logger.debug(f"Participant already watched: {participant.identity}")
            return
        self._participant_watchers[participant.identity] = ParticipantWatcher(
            participant, self._sink, self._binder
        )

    def _on_participant_disconnected(self, participant: Participant) -> None:
        watcher = self._participant_watchers.pop(participant.identity, None)
        if watcher is not None:
            watcher.dispose()

    def _on_leave(self) -> None:
        self._unwire_leave()
        self._request_disconnect("leave")

    def _on_disconnected(self, reason: Any = None) -> None:
        if self.closed:
            return
        logger.info(f"Room disconnected: reason={reason}")

        self.session.off("disconnected", self._on_disconnected)
        self.session.off("participant_connected", self._on_participant_connected)
        self.session.off("participant_disconnected", self._on_participant_disconnected)
        self._unwire_leave()
        for kind, handler in self._signal_handlers.items():
            self._termination_signals.unsubscribe(kind, handler)
        self._signal_handlers.clear()

        for watcher in self._participant_watchers.values():
            watcher.dispose()
        self._participant_watchers.clear()

        if self._local_track is not None:
            self._binder.detach(self._local_track)

        self._transition(RoomState.DISCONNECTED)
        self._closed.set(None)

    def _unwire_leave(self) -> None:
        if self._leave_wired:
            self._leave_wired = False
            self._leave_control.off("activate", self._on_leave)

    def _transition(self, new: RoomState) -> None:
        if not RoomStateMachine.can_transition(self._state, new):
            raise AppError(
                AppErrorCode.E_INVALID_STATE_TRANSITION,
                f"Invalid room state transition: {self._state} -> {new}",
            )
        logger.debug(f"Room state: {self._state} -> {new}")
        self._state = new


class SessionController:
    """Joins rooms from a session source and keeps the view in sync with them."""

    def __init__(
        self,
        source: SessionSource,
        termination_signals: TerminationSignals | None = None,
        binder: TrackBinder | None = None,
    ) -> None:
        self._source = source
        self._termination_signals = termination_signals
        self._binder = binder or TrackBinder()

    async def join(
        self,
        credential: str,
        options: Any,
        sink: Sink,
        leave_control: LeaveControl,
    ) -> RoomSession:
        """Establish a room and wire it to the sink.

        Args:
            credential: Access token for the room
            options: Connect options understood by the session source
            sink: Where renderable handles are mounted
            leave_control: Control whose `activate` event leaves the room

        Returns:
            The RoomSession handle, in CONNECTED state

        Raises:
            RoomConnectionError: If the room could not be established
            PreconditionError: If there is no local video track to preview.
                The established room is disconnected before this propagates.
        """
        try:
            session = await self._source.establish(credential, options)
        except RoomConnectionError as exc:
            logger.warning(f"{exc.errcode} {exc.erresid} msg={exc.errmesg} caller={exc.caller_info}")
            raise
        except Exception as exc:
            error = RoomConnectionError(
                AppErrorCode.E_ROOM_CONNECT_FAILED, f"Failed to connect to room: {exc}"
            )
            logger.warning(f"{error.errcode} {error.erresid} msg={error.errmesg}")
            raise error from exc

        room_session = RoomSession(
            session=session,
            sink=sink,
            leave_control=leave_control,
            binder=self._binder,
            termination_signals=self._termination_signals,
        )
        try:
            room_session.start()
        except PreconditionError as exc:
            logger.warning(f"{exc.errcode} {exc.erresid} msg={exc.errmesg}; leaving room")
            await session.disconnect()
            raise
        logger.info(
            f"Joined room: participants={list(session.remote_participants.keys())}"
        )
        return room_session

    async def join_room(
        self,
        credential: str,
        options: Any,
        sink: Sink,
        leave_control: LeaveControl,
    ) -> RoomSession:
        """Join a room and return only after it has disconnected."""
        room_session = await self.join(credential, options, sink, leave_control)
        await room_session.wait_closed()
        return room_session
