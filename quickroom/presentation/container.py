"""In-memory participants view.

`ParticipantsContainer` plays the role of the page container the media
elements are mounted into. A renderer (window, recorder, test) reads
`children` to decide what to draw; each `MediaElement` keeps a reference to
the track it was produced from.
"""

from __future__ import annotations

from typing import Any

from livekit import rtc
from loguru import logger


class MediaElement:
    """Renderable handle produced by `RenderableTrack.attach()`."""

    def __init__(self, track: Any) -> None:
        self.track = track
        self.style: dict[str, str] = {}
        self.parent: ParticipantsContainer | None = None

    @property
    def mounted(self) -> bool:
        return self.parent is not None

    def remove(self) -> None:
        """Unmount from whichever container holds this element."""
        if self.parent is not None:
            self.parent.remove_child(self)

    def __repr__(self) -> str:
        return f"MediaElement(track={self.track!r}, mounted={self.mounted})"


class RenderableTrack:
    """Track that hands out MediaElements and remembers them until detached."""

    def __init__(self, sid: str, kind: str = "video") -> None:
        self.sid = sid
        self.kind = kind
        self._elements: list[MediaElement] = []

    @property
    def elements(self) -> list[MediaElement]:
        return list(self._elements)

    def attach(self) -> MediaElement:
        element = MediaElement(self)
        self._elements.append(element)
        return element

    def detach(self) -> list[MediaElement]:
        elements, self._elements = self._elements, []
        return elements

    def __repr__(self) -> str:
        return f"{type(self).__name__}(sid={self.sid!r}, kind={self.kind!r})"


class ParticipantsContainer:
    def __init__(self) -> None:
        self._children: list[MediaElement] = []

    @property
    def children(self) -> list[MediaElement]:
        return list(self._children)

    def append(self, element: MediaElement) -> None:
        # An element lives in one container at a time, as in a DOM.
        if element.parent is not None:
            element.remove()
        element.parent = self
        self._children.append(element)
        logger.info(f"Mounted {element.track!r}")

    def remove_child(self, element: MediaElement) -> None:
        if element in self._children:
            self._children.remove(element)
            logger.info(f"Unmounted {element.track!r}")
        element.parent = None

    def __contains__(self, element: object) -> bool:
        return element in self._children

    def __len__(self) -> int:
        return len(self._children)

    def __iter__(self):
        return iter(list(self._children))


class LeaveButton(rtc.EventEmitter[str]):
    """Leave control: emits `activate` every time it is pressed."""

    def activate(self) -> None:
        self.emit("activate")
