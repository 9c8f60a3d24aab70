"""Tests for the OneShot single-fire channel."""

import asyncio

import pytest

from quickroom.domain.room.one_shot import OneShot


class TestOneShot:
    def test_first_set_wins(self):
        shot: OneShot[str] = OneShot()

        assert shot.set("first") is True
        assert shot.set("second") is False
        assert shot.is_set is True

    @pytest.mark.asyncio
    async def test_wait_returns_first_value(self):
        shot: OneShot[str] = OneShot()
        waiter = asyncio.create_task(shot.wait())
        await asyncio.sleep(0)
        assert not waiter.done()

        shot.set("first")
        shot.set("second")

        assert await asyncio.wait_for(waiter, timeout=1) == "first"

    @pytest.mark.asyncio
    async def test_wait_after_set_returns_immediately(self):
        shot: OneShot[None] = OneShot()
        shot.set(None)

        assert await asyncio.wait_for(shot.wait(), timeout=1) is None
