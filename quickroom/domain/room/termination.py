"""Process-level signals that should end the room session.

Two kinds are recognised:
- ABOUT_TO_TERMINATE: the process is being asked to exit (SIGTERM, SIGINT)
- SUSPENDED: the controlling terminal went away (SIGHUP)

Which of them can be observed depends on the platform and on the thread the
event loop runs in, so callers first ask for the available set and then wire
one handler per available kind.
"""

from __future__ import annotations

import asyncio
import signal
import sys
import threading
from collections import defaultdict
from collections.abc import Callable
from enum import Enum
from typing import Protocol

from loguru import logger


class TerminationSignal(str, Enum):
    ABOUT_TO_TERMINATE = "about_to_terminate"
    SUSPENDED = "suspended"

    def __str__(self) -> str:
        return self.value


SIGNAL_NAMES: dict[TerminationSignal, tuple[str, ...]] = {
    TerminationSignal.ABOUT_TO_TERMINATE: ("SIGTERM", "SIGINT"),
    TerminationSignal.SUSPENDED: ("SIGHUP",),
}


class TerminationSignals(Protocol):
    def available(self) -> set[TerminationSignal]: ...

    def subscribe(self, kind: TerminationSignal, callback: Callable[[], None]) -> None: ...

    def unsubscribe(self, kind: TerminationSignal, callback: Callable[[], None]) -> None: ...


class ProcessTerminationSignals:
    """Termination signals delivered through the running asyncio loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop or asyncio.get_running_loop()
        self._callbacks: dict[TerminationSignal, list[Callable[[], None]]] = defaultdict(list)

    def available(self) -> set[TerminationSignal]:
        # Loop signal handlers are unsupported on Windows and outside the main thread.
        if sys.platform == "win32" or threading.current_thread() is not threading.main_thread():
            return set()
        return {kind for kind in TerminationSignal if self._signums(kind)}

    def subscribe(self, kind: TerminationSignal, callback: Callable[[], None]) -> None:
        callbacks = self._callbacks[kind]
        callbacks.append(callback)
        if len(callbacks) == 1:
            for signum in self._signums(kind):
                self._loop.add_signal_handler(signum, self._dispatch, kind)

    def unsubscribe(self, kind: TerminationSignal, callback: Callable[[], None]) -> None:
        callbacks = self._callbacks[kind]
        if callback in callbacks:
            callbacks.remove(callback)
        if not callbacks:
            for signum in self._signums(kind):
                self._loop.remove_signal_handler(signum)

    def _dispatch(self, kind: TerminationSignal) -> None:
        logger.info(f"Received termination signal: {kind}")
        for callback in list(self._callbacks[kind]):
            callback()

    @staticmethod
    def _signums(kind: TerminationSignal) -> list[signal.Signals]:
        return [getattr(signal, name) for name in SIGNAL_NAMES[kind] if hasattr(signal, name)]


def detect_termination_signals(signals: TerminationSignals | None) -> set[TerminationSignal]:
    """Return the termination signals that can be wired in this environment."""
    if signals is None:
        return set()
    available = signals.available()
    logger.debug(f"Available termination signals: {sorted(str(s) for s in available)}")
    return available
