"""Follows one track publication's subscription lifecycle."""

from __future__ import annotations

from loguru import logger

from quickroom.domain.room.protocols import Publication, Sink, Track
from quickroom.domain.room.track_binder import TrackBinder


class PublicationWatcher:
    """Attaches the publication's track on `subscribed`, detaches it on `unsubscribed`.

    A publication that is already subscribed when the watcher is created is
    attached right away, so a subscription that landed before we started
    watching is not lost.
    """

    def __init__(
        self,
        publication: Publication,
        sink: Sink,
        binder: TrackBinder | None = None,
    ) -> None:
        self.publication = publication
        self._sink = sink
        self._binder = binder or TrackBinder()
        self._disposed = False

        if publication.track is not None:
            self._binder.attach(publication.track, sink)

        publication.on("subscribed", self._on_subscribed)
        publication.on("unsubscribed", self._on_unsubscribed)

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        """Stop reacting to the publication. Handles already mounted are left alone."""
        if self._disposed:
            return
        self._disposed = True
        self.publication.off("subscribed", self._on_subscribed)
        self.publication.off("unsubscribed", self._on_unsubscribed)
        logger.debug(f"Stopped watching publication: {self.publication.sid}")

    def _on_subscribed(self, track: Track) -> None:
        if self._disposed:
            return
        self._binder.attach(track, self._sink)

    def _on_unsubscribed(self, track: Track) -> None:
        if self._disposed:
            return
        self._binder.detach(track)
