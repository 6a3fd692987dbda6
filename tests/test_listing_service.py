"""
Tests for the listing repository.
"""

import pytest
from faker import Faker

from classifieds.models import ListingStatus
from classifieds.services import listing_service
from classifieds.utils.errors import RequiredFieldError
from tests.helpers import listing_form, make_listing, new_user_id

fake = Faker()


class TestCreateListing:
    """Tests for listing_service.create_listing"""

    def test_create_forces_pending(self, db_session, seller_id):
        """New listings always wait for moderation."""
        data = listing_form(user_id=seller_id, status=ListingStatus.ACTIVE)

        listing = listing_service.create_listing(data)

        stored = listing_service.get_listing(listing['id'])
        assert stored['status'] == ListingStatus.PENDING
        assert stored['user_id'] == seller_id
        assert stored['title'] == data['title']

    def test_create_drops_rejection_reason(self, db_session, seller_id):
        """A new listing never carries a rejection reason."""
        listing = listing_service.create_listing(
            listing_form(user_id=seller_id, rejection_reason='copied from elsewhere')
        )

        assert listing_service.get_listing(listing['id'])['rejection_reason'] is None

    def test_create_returns_optimistic_timestamp(self, db_session, seller_id):
        """The returned record carries a local epoch-ms created_at."""
        listing = listing_service.create_listing(listing_form(user_id=seller_id))

        assert isinstance(listing['created_at'], int)
        assert listing['created_at'] > 1_600_000_000_000

    def test_create_without_user(self, db_session):
        """A listing cannot be created without an owner."""
        with pytest.raises(RequiredFieldError) as exc_info:
            listing_service.create_listing(listing_form())

        assert exc_info.value.field == 'user_id'
        assert listing_service.get_all_listings() == []


class TestReadListings:
    """Tests for listing queries"""

    def test_active_listings_newest_first(self, db_session, seller_id):
        """Only active listings, sorted by creation time descending."""
        older = make_listing(seller_id, ListingStatus.ACTIVE)
        make_listing(seller_id, ListingStatus.PENDING)
        newer = make_listing(seller_id, ListingStatus.ACTIVE)

        listings = listing_service.get_active_listings()

        assert [l['id'] for l in listings] == [newer, older]

    def test_listings_by_user(self, db_session, seller_id):
        """Listings of one owner in every status."""
        mine = {
            make_listing(seller_id, ListingStatus.ACTIVE),
            make_listing(seller_id, ListingStatus.REJECTED),
        }
        make_listing(new_user_id(), ListingStatus.ACTIVE)

        listings = listing_service.get_listings_by_user(seller_id)

        assert {l['id'] for l in listings} == mine

    def test_get_missing_listing(self, db_session):
        """Unknown ids read as None."""
        assert listing_service.get_listing('does-not-exist') is None
        assert listing_service.get_listing(None) is None

    def test_count_listings(self, db_session, seller_id):
        """Counts per status and overall."""
        make_listing(seller_id, ListingStatus.ACTIVE)
        make_listing(seller_id, ListingStatus.ACTIVE)
        make_listing(seller_id, ListingStatus.PENDING)

        assert listing_service.count_listings(ListingStatus.ACTIVE) == 2
        assert listing_service.count_listings(ListingStatus.PENDING) == 1
        assert listing_service.count_listings(ListingStatus.REJECTED) == 0
        assert listing_service.count_listings() == 3

    def test_timestamps_are_epoch_millis(self, db_session, active_listing):
        """Documents leave the store with created_at as an int."""
        listing = listing_service.get_listing(active_listing)

        assert isinstance(listing['created_at'], int)


class TestUpdateListing:
    """Tests for listing_service.update_listing"""

    def test_update_fields(self, db_session, active_listing):
        """Partial updates touch only the given fields."""
        before = listing_service.get_listing(active_listing)

        updated = listing_service.update_listing(active_listing, {'price': 10.5})

        assert updated['price'] == 10.5
        assert updated['title'] == before['title']

    def test_update_cannot_change_owner(self, db_session, active_listing, seller_id):
        """Owner, id and creation time are fixed."""
        before = listing_service.get_listing(active_listing)

        updated = listing_service.update_listing(active_listing, {
            'user_id': new_user_id(),
            'created_at': 0,
            'id': 'other',
        })

        assert updated['user_id'] == seller_id
        assert updated['id'] == active_listing
        assert updated['created_at'] == before['created_at']

    def test_update_missing_listing(self, db_session):
        assert listing_service.update_listing('does-not-exist', {'title': 'x'}) is None


class TestDeleteListing:
    """Tests for listing_service.delete_listing"""

    def test_delete_listing(self, db_session, active_listing):
        assert listing_service.delete_listing(active_listing) is True
        assert listing_service.get_listing(active_listing) is None

    def test_delete_missing_listing(self, db_session):
        """Deleting an unknown id succeeds without doing anything."""
        assert listing_service.delete_listing('does-not-exist') is True


class TestModeration:
    """Tests for approve/reject"""

    def test_approve_clears_reason(self, db_session, seller_id):
        listing_id = make_listing(seller_id, ListingStatus.REJECTED, rejection_reason='blurry photos')

        approved = listing_service.approve_listing(listing_id)

        assert approved['status'] == ListingStatus.ACTIVE
        assert approved['rejection_reason'] is None

    def test_reject_stores_reason(self, db_session, pending_listing):
        reason = fake.sentence()

        rejected = listing_service.reject_listing(pending_listing, reason)

        assert rejected['status'] == ListingStatus.REJECTED
        assert rejected['rejection_reason'] == reason

    @pytest.mark.parametrize('reason', [None, '', '   '])
    def test_reject_requires_reason(self, db_session, pending_listing, reason):
        """A blank reason is refused and nothing is written."""
        with pytest.raises(RequiredFieldError):
            listing_service.reject_listing(pending_listing, reason)

        assert listing_service.get_listing(pending_listing)['status'] == ListingStatus.PENDING

    def test_approve_missing_listing(self, db_session):
        assert listing_service.approve_listing('does-not-exist') is None
