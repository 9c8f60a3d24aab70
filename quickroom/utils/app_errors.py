"""Application error types.

Every error raised by quickroom carries a stable `errcode`, a human readable
`errmesg`, a short `erresid` for correlating log lines, and the caller info
captured at the raise site.
"""

from __future__ import annotations

import inspect
from enum import Enum
from uuid import uuid4


class AppErrorCode(str, Enum):
    E_INTERNAL_ERROR = "E_INTERNAL_ERROR"
    E_INVALID_REQUEST = "E_INVALID_REQUEST"
    E_INVALID_ROOM_SELECTION = "E_INVALID_ROOM_SELECTION"
    E_INVALID_STATE_TRANSITION = "E_INVALID_STATE_TRANSITION"
    E_ROOM_CONNECT_FAILED = "E_ROOM_CONNECT_FAILED"
    E_LOCAL_TRACK_MISSING = "E_LOCAL_TRACK_MISSING"

    def __str__(self) -> str:
        return self.value


class AppError(Exception):
    """Base error with errcode/errmesg/erresid, mirroring the API failure shape."""

    default_errcode: AppErrorCode = AppErrorCode.E_INTERNAL_ERROR

    def __init__(
        self,
        errcode: AppErrorCode | str | None = None,
        errmesg: str = "We are sorry, an error occurred.",
    ) -> None:
        if errcode is None:
            errcode = self.default_errcode
        self.errcode = errcode.value if isinstance(errcode, AppErrorCode) else errcode
        self.errmesg = errmesg
        self.erresid = uuid4().hex[:10]

        caller_frame = inspect.stack()[1]
        module = inspect.getmodule(caller_frame.frame)
        module_name = (
            module.__name__
            if module and getattr(module, "__name__", None)
            else caller_frame.filename
        )
        self.caller_info = f"{module_name}:{caller_frame.function}:{caller_frame.lineno}"

        super().__init__(f"{self.errcode}: {errmesg}")


class RoomConnectionError(AppError):
    """Session establishment failed (bad token, network, negotiation)."""

    default_errcode = AppErrorCode.E_ROOM_CONNECT_FAILED


class PreconditionError(AppError):
    """A programming or configuration error detected while joining."""

    default_errcode = AppErrorCode.E_LOCAL_TRACK_MISSING


__all__ = [
    "AppError",
    "AppErrorCode",
    "PreconditionError",
    "RoomConnectionError",
]
