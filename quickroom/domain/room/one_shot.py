"""Single-fire completion channel."""

from __future__ import annotations

import asyncio
from typing import Generic, TypeVar

T = TypeVar("T")


class OneShot(Generic[T]):
    """Completes exactly once; later `set()` calls are ignored and reported."""

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._completed = False
        self._value: T

    @property
    def is_set(self) -> bool:
        return self._completed

    def set(self, value: T) -> bool:
        """Complete the channel. Returns False if it was already completed."""
        if self._completed:
            return False
        self._completed = True
        self._value = value
        self._event.set()
        return True

    async def wait(self) -> T:
        await self._event.wait()
        return self._value
