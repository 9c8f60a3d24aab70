"""quickroom command line client.

Pick a screen name and a room, join it, and stay until you type `leave`
(or the process is asked to terminate). After leaving, the room selector is
shown again.

Run:
    quickroom --identity alice --room my-room
"""

from __future__ import annotations

import argparse
import asyncio
import sys
import threading

from loguru import logger

from quickroom.app_config import get_app_environ_config
from quickroom.domain.room import (
    ProcessTerminationSignals,
    RoomSession,
    SessionController,
    TerminationSignal,
)
from quickroom.presentation import LeaveButton, ParticipantsContainer, RoomSelector
from quickroom.schemas import ConnectOptions, RoomSelection
from quickroom.services.integrations.livekit_room import LivekitRoomSource
from quickroom.services.integrations.livekit_service import livekit_service
from quickroom.shared.logger import init_logger
from quickroom.utils.app_errors import AppError, RoomConnectionError

LEAVE_COMMAND = "leave"


class ConsoleInput:
    """Reads stdin on a daemon thread and hands lines to the event loop."""

    def __init__(self) -> None:
        self._queue: asyncio.Queue[str | None] = asyncio.Queue()
        self._loop = asyncio.get_running_loop()
        self._eof = False

    def start(self) -> None:
        threading.Thread(target=self._pump, name="console-input", daemon=True).start()

    def _pump(self) -> None:
        for line in sys.stdin:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, line.strip())
        self._loop.call_soon_threadsafe(self._queue.put_nowait, None)

    async def readline(self, prompt: str | None = None) -> str | None:
        if self._eof:
            return None
        if prompt:
            print(prompt, end="", flush=True)
        line = await self._queue.get()
        if line is None:
            self._eof = True
        return line


async def select_room(
    console: ConsoleInput, identity: str | None, room_name: str | None
) -> RoomSelection | None:
    """Show the room selector until a valid selection is made. None on end of input."""
    selector = RoomSelector(default_room_name=room_name)
    while not selector.submitted:
        name = identity or await console.readline("Screen name: ")
        room = room_name or await console.readline("Room name: ")
        if name is None or room is None:
            return None
        try:
            selector.submit(name, room)
        except AppError as exc:
            logger.warning(exc.errmesg)
            identity = room_name = None
    return await selector.select()


async def watch_for_leave(console: ConsoleInput, leave: LeaveButton) -> None:
    print(f"Type '{LEAVE_COMMAND}' to leave the room.")
    while True:
        line = await console.readline()
        if line is None or line.lower() == LEAVE_COMMAND:
            leave.activate()
            return


async def run(args: argparse.Namespace) -> int:
    cfg = get_app_environ_config()
    console = ConsoleInput()
    console.start()

    controller = SessionController(
        LivekitRoomSource(url=livekit_service.url),
        termination_signals=ProcessTerminationSignals(),
    )
    options = ConnectOptions(
        auto_subscribe=cfg.AUTO_SUBSCRIBE,
        video_width=cfg.LOCAL_VIDEO_WIDTH,
        video_height=cfg.LOCAL_VIDEO_HEIGHT,
    )

    # Command line values only preselect the first room; afterwards the selector prompts.
    identity, room_name = args.identity, args.room or cfg.DEFAULT_ROOM_NAME
    while True:
        selection = await select_room(console, identity, room_name)
        identity = room_name = None
        if selection is None:
            return 0

        token = livekit_service.create_access_token(
            identity=selection.identity,
            room=selection.room_name,
            name=selection.identity,
        )
        container = ParticipantsContainer()
        leave = LeaveButton()

        try:
            room_session = await controller.join(token, options, container, leave)
        except RoomConnectionError as exc:
            logger.error(f"Unable to connect to room {selection.room_name}: {exc.errmesg}")
            if args.once:
                return 1
            continue

        room_session = await _stay_in_room(console, room_session, leave)
        logger.info(f"Left room {selection.room_name}")

        if args.once or room_session.disconnect_trigger in {str(s) for s in TerminationSignal}:
            return 0


async def _stay_in_room(
    console: ConsoleInput, room_session: RoomSession, leave: LeaveButton
) -> RoomSession:
    leave_task = asyncio.create_task(watch_for_leave(console, leave))
    try:
        await room_session.wait_closed()
    finally:
        leave_task.cancel()
    return room_session


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="quickroom", description="Join a LiveKit room")
    parser.add_argument("--identity", help="Screen name used as participant identity")
    parser.add_argument("--room", help="Room name to join")
    parser.add_argument(
        "--once", action="store_true", help="Exit after leaving the first room"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    init_logger(debug=get_app_environ_config().DEBUG)
    try:
        return asyncio.run(run(args))
    except AppError as exc:
        logger.error(f"{exc.errcode} {exc.erresid} msg={exc.errmesg} caller={exc.caller_info}")
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
