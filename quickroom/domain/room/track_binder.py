"""Binds media tracks to the participants view."""

from __future__ import annotations

from loguru import logger

from quickroom.domain.room.protocols import Sink, Track


class TrackBinder:
    """Attaches and detaches a single track's renderable handles."""

    FULL_WIDTH = "100%"

    def attach(self, track: Track, sink: Sink) -> None:
        handle = track.attach()
        handle.style["width"] = self.FULL_WIDTH
        sink.append(handle)
        logger.debug(f"Attached track: {track!r}")

    def detach(self, track: Track) -> None:
        handles = track.detach()
        for handle in handles:
            handle.remove()
        logger.debug(f"Detached track: {track!r} handles={len(handles)}")
