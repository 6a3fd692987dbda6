"""
Tests for the document store queries and the change feed.
"""

import pytest

from classifieds.models import ListingStatus
from classifieds.services import chat_service, document_store, listing_service
from classifieds.services.change_feed import feed
from classifieds.services.document_store import DESCENDING, InvalidQuery, Query
from tests.helpers import listing_form, make_listing, make_message


class Recorder:
    """Snapshot callback that keeps every delivery."""

    def __init__(self):
        self.snapshots = []
        self.errors = []

    def __call__(self, documents):
        self.snapshots.append(documents)

    def on_error(self, exc):
        self.errors.append(exc)

    @property
    def last(self):
        return self.snapshots[-1]


class TestQuery:
    """Tests for the Query builder"""

    def test_unknown_collection(self):
        with pytest.raises(InvalidQuery):
            Query('users')

    def test_unknown_field(self):
        with pytest.raises(InvalidQuery):
            Query('listings').where('password', 'x')

    def test_bad_direction(self):
        with pytest.raises(InvalidQuery):
            Query('listings').order_by('created_at', 'sideways')

    @pytest.mark.parametrize('limit', [0, -1, 'ten'])
    def test_bad_limit(self, limit):
        with pytest.raises(InvalidQuery):
            Query('listings').limit(limit)

    def test_builder_is_immutable(self):
        base = Query('listings')
        narrowed = base.where('status', ListingStatus.ACTIVE)

        assert base.filters == ()
        assert narrowed.filters == (('status', ListingStatus.ACTIVE),)

    def test_limit(self, db_session, seller_id):
        for _ in range(3):
            make_listing(seller_id)

        query = Query('listings').order_by('created_at', DESCENDING).limit(2)

        assert len(document_store.fetch(query)) == 2


class TestSubscribe:
    """Tests for ChangeFeed.subscribe"""

    def test_first_snapshot_is_immediate(self, db_session, active_listing):
        recorder = Recorder()

        feed.subscribe(listing_service.all_listings_query(), recorder)

        assert len(recorder.snapshots) == 1
        assert [l['id'] for l in recorder.last] == [active_listing]

    def test_commit_redelivers_full_result(self, db_session, seller_id, active_listing):
        """Every change delivers the complete result set, not a diff."""
        recorder = Recorder()
        feed.subscribe(listing_service.listings_by_user_query(seller_id), recorder)

        created = listing_service.create_listing(listing_form(user_id=seller_id))

        assert len(recorder.snapshots) == 2
        assert [l['id'] for l in recorder.last] == [created['id'], active_listing]

    def test_other_collection_not_redelivered(self, db_session, active_listing, buyer_id, seller_id):
        recorder = Recorder()
        feed.subscribe(listing_service.all_listings_query(), recorder)

        chat_service.send_message(active_listing, buyer_id, seller_id, 'hello')

        assert len(recorder.snapshots) == 1

    def test_status_change_leaves_filtered_query(self, db_session, pending_listing):
        """A listing leaves a status query as soon as its status changes."""
        recorder = Recorder()
        feed.subscribe(listing_service.listings_by_status_query(ListingStatus.PENDING), recorder)

        listing_service.approve_listing(pending_listing)

        assert recorder.last == []

    def test_cancel_stops_delivery(self, db_session, seller_id):
        recorder = Recorder()
        subscription = feed.subscribe(listing_service.all_listings_query(), recorder)

        subscription.cancel()
        listing_service.create_listing(listing_form(user_id=seller_id))

        assert len(recorder.snapshots) == 1
        assert feed.active_count() == 0

    def test_calling_handle_cancels(self, db_session):
        subscription = feed.subscribe(listing_service.all_listings_query(), Recorder())

        subscription()

        assert subscription.active is False
        assert feed.active_count('listings') == 0

    def test_query_failure_reported(self, db_session, monkeypatch):
        """A failing query reaches on_error and no snapshot is delivered."""
        recorder = Recorder()

        def broken_fetch(query):
            raise RuntimeError('store unavailable')

        monkeypatch.setattr(document_store, 'fetch', broken_fetch)
        feed.subscribe(listing_service.all_listings_query(), recorder, recorder.on_error)

        assert recorder.snapshots == []
        assert len(recorder.errors) == 1

    def test_callback_failure_isolated(self, db_session, seller_id):
        """One failing subscriber does not stop delivery to the others."""
        recorder = Recorder()

        def explode(documents):
            raise ValueError('bad subscriber')

        feed.subscribe(listing_service.all_listings_query(), explode)
        feed.subscribe(listing_service.all_listings_query(), recorder)
        listing_service.create_listing(listing_form(user_id=seller_id))

        assert len(recorder.snapshots) == 2

    def test_write_from_callback_is_delivered(self, db_session, active_listing, buyer_id, seller_id):
        """A write made inside a snapshot callback is delivered after it, without recursion."""
        make_message(active_listing, seller_id, buyer_id)
        recorder = Recorder()

        def mark_read(documents):
            recorder(documents)
            if any(not m['read'] and m['receiver_id'] == buyer_id for m in documents):
                chat_service.mark_messages_read(active_listing, buyer_id)

        feed.subscribe(chat_service.listing_messages_query(active_listing), mark_read)

        assert len(recorder.snapshots) == 2
        assert recorder.snapshots[0][0]['read'] is False
        assert recorder.last[0]['read'] is True

    def test_clear(self, db_session):
        subscription = feed.subscribe(listing_service.all_listings_query(), Recorder())

        feed.clear()

        assert subscription.active is False
        assert feed.active_count() == 0
