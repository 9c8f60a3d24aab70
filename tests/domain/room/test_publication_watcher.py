"""Tests for PublicationWatcher subscribe/unsubscribe handling."""

from quickroom.domain.room.publication_watcher import PublicationWatcher
from quickroom.presentation import ParticipantsContainer, RenderableTrack
from tests.fixtures.room_fixtures import FakePublication, RecordingBinder


class TestPublicationWatcher:
    def test_already_subscribed_publication_is_attached(self, container, binder):
        track = RenderableTrack(sid="TR_1")
        publication = FakePublication("PUB_1", track=track)

        PublicationWatcher(publication, container, binder)

        assert binder.attached == [track]
        assert len(container) == 1

    def test_unsubscribed_publication_is_not_attached(self, container, binder):
        PublicationWatcher(FakePublication("PUB_1"), container, binder)

        assert binder.attached == []
        assert len(container) == 0

    def test_subscribe_then_unsubscribe(self, container, binder):
        publication = FakePublication("PUB_1")
        PublicationWatcher(publication, container, binder)
        track = RenderableTrack(sid="TR_1")

        publication.subscribe(track)
        assert len(container) == 1

        publication.unsubscribe()
        assert binder.detached == [track]
        assert len(container) == 0

    def test_subscription_cycles_keep_mounts_and_removals_paired(
        self, container: ParticipantsContainer, binder: RecordingBinder
    ):
        publication = FakePublication("PUB_1")
        PublicationWatcher(publication, container, binder)

        for i in range(5):
            publication.subscribe(RenderableTrack(sid=f"TR_{i}"))
            assert len(binder.attached) == i + 1
            assert len(binder.detached) == i
            assert len(container) == 1

            publication.unsubscribe()
            assert len(binder.attached) == len(binder.detached)
            assert len(container) == 0

    def test_resubscribe_same_track_does_not_leak(self, container, binder):
        track = RenderableTrack(sid="TR_1")
        publication = FakePublication("PUB_1")
        PublicationWatcher(publication, container, binder)

        publication.subscribe(track)
        publication.unsubscribe()
        publication.subscribe(track)

        assert len(container) == 1
        assert len(track.elements) == 1

    def test_dispose_stops_reacting(self, container, binder):
        publication = FakePublication("PUB_1")
        watcher = PublicationWatcher(publication, container, binder)

        watcher.dispose()
        publication.subscribe(RenderableTrack(sid="TR_1"))

        assert watcher.disposed is True
        assert binder.attached == []
        assert len(container) == 0

    def test_dispose_is_idempotent(self, container, binder):
        watcher = PublicationWatcher(FakePublication("PUB_1"), container, binder)

        watcher.dispose()
        watcher.dispose()

        assert watcher.disposed is True
