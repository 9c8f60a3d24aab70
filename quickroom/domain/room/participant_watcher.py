"""Follows a remote participant's current and future publications."""

from __future__ import annotations

from loguru import logger

from quickroom.domain.room.protocols import Participant, Publication, Sink
from quickroom.domain.room.publication_watcher import PublicationWatcher
from quickroom.domain.room.track_binder import TrackBinder


class ParticipantWatcher:
    """Owns one PublicationWatcher per publication of a participant.

    The existing publications are snapshotted and the `track_published`
    handler is registered in the same synchronous step, so a publication
    arriving around discovery time is watched exactly once.
    """

    def __init__(
        self,
        participant: Participant,
        sink: Sink,
        binder: TrackBinder | None = None,
    ) -> None:
        self.participant = participant
        self._sink = sink
        self._binder = binder or TrackBinder()
        self._publication_watchers: dict[str, PublicationWatcher] = {}
        self._disposed = False

        for publication in list(participant.track_publications.values()):
            self._watch(publication)

        participant.on("track_published", self._on_track_published)
        participant.on("track_unpublished", self._on_track_unpublished)
        logger.info(
            f"Watching participant: {participant.identity} "
            f"publications={list(self._publication_watchers)}"
        )

    @property
    def publication_watchers(self) -> dict[str, PublicationWatcher]:
        return dict(self._publication_watchers)

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        """Deregister every handler this watcher and its publication watchers own."""
        if self._disposed:
            return
        self._disposed = True
        self.participant.off("track_published", self._on_track_published)
        self.participant.off("track_unpublished", self._on_track_unpublished)
        for watcher in self._publication_watchers.values():
            watcher.dispose()
        self._publication_watchers.clear()
        logger.info(f"Stopped watching participant: {self.participant.identity}")

    def _watch(self, publication: Publication) -> None:
        if publication.sid in self._publication_watchers:
            logger.debug(f"Publication already watched: {publication.sid}")
            return
        self._publication_watchers[publication.sid] = PublicationWatcher(
            publication, self._sink, self._binder
        )

    def _on_track_published(self, publication: Publication) -> None:
        if self._disposed:
            return
        self._watch(publication)

    def _on_track_unpublished(self, publication: Publication) -> None:
        watcher = self._publication_watchers.pop(publication.sid, None)
        if watcher is not None:
            watcher.dispose()
