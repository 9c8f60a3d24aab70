"""Room selection form: collects a screen name and a room name, once."""

from __future__ import annotations

from loguru import logger
from pydantic import ValidationError

from quickroom.domain.room.one_shot import OneShot
from quickroom.schemas import RoomSelection
from quickroom.utils.app_errors import AppError, AppErrorCode


class RoomSelector:
    def __init__(self, default_room_name: str | None = None) -> None:
        self.default_room_name = default_room_name
        self._selection: OneShot[RoomSelection] = OneShot()

    @property
    def submitted(self) -> bool:
        return self._selection.is_set

    def submit(self, identity: str, room_name: str | None = None) -> bool:
        """Submit the form. Returns False if a selection was already made.

        Raises:
            AppError: If identity or room name is blank
        """
        if self._selection.is_set:
            return False
        room_name = room_name or self.default_room_name or ""
        try:
            selection = RoomSelection(identity=identity, room_name=room_name)
        except ValidationError as exc:
            raise AppError(
                AppErrorCode.E_INVALID_ROOM_SELECTION,
                f"Screen name and room name are required: {exc.error_count()} invalid field(s)",
            ) from exc

        logger.info(f"Room selected: identity={selection.identity} room={selection.room_name}")
        return self._selection.set(selection)

    async def select(self) -> RoomSelection:
        return await self._selection.wait()
