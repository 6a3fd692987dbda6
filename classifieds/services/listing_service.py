"""Listing repository: queries and writes over the listings collection.

One-shot reads only. Pages that must follow concurrent writes open live
queries on the change feed with the query builders below instead.
"""

import logging

from classifieds import db
from classifieds.models import Listing, ListingStatus
from classifieds.services import document_store
from classifieds.services.document_store import DESCENDING, Query
from classifieds.utils.errors import RequiredFieldError
from classifieds.utils.timestamps import now_millis

logger = logging.getLogger(__name__)

LISTINGS_COLLECTION = 'listings'


def all_listings_query():
    return Query(LISTINGS_COLLECTION).order_by('created_at', DESCENDING)


def listings_by_status_query(status):
    return Query(LISTINGS_COLLECTION).where('status', status).order_by('created_at', DESCENDING)


def listings_by_user_query(user_id):
    return Query(LISTINGS_COLLECTION).where('user_id', user_id).order_by('created_at', DESCENDING)


def listing_query(listing_id):
    return Query(LISTINGS_COLLECTION).where('id', listing_id)


def get_all_listings():
    return document_store.fetch(all_listings_query())


def get_listings_by_status(status):
    return document_store.fetch(listings_by_status_query(status))


def get_active_listings():
    return get_listings_by_status(ListingStatus.ACTIVE)


def get_pending_listings():
    return get_listings_by_status(ListingStatus.PENDING)


def get_listings_by_user(user_id):
    return document_store.fetch(listings_by_user_query(user_id))


def get_listing(listing_id):
    """Get a listing by id; None when it does not exist."""
    return document_store.get(LISTINGS_COLLECTION, listing_id)


def count_listings(status=None):
    query = Query(LISTINGS_COLLECTION)
    if status:
        query = query.where('status', status)
    return document_store.count(query)


def create_listing(data):
    """Create a listing in pending state.

    The owner id is required. The returned record is optimistic: its
    created_at is the local wall clock, the stored value is assigned by
    the store and arrives through live queries.
    """
    user_id = data.get('user_id')
    if not user_id:
        raise RequiredFieldError('user_id', 'User ID is required to create a listing.')

    fields = {key: data[key] for key in Listing.UPDATABLE_FIELDS if key in data}
    fields['status'] = ListingStatus.PENDING
    fields.pop('rejection_reason', None)

    listing = Listing(user_id=user_id, **fields)
    db.session.add(listing)
    document_store.commit(LISTINGS_COLLECTION)
    logger.info(f'Listing {listing.id} created by {user_id}')

    result = listing.to_dict()
    result['created_at'] = now_millis()
    return result


def update_listing(listing_id, updates):
    """Apply a partial update and return the re-read record.

    Attempts to change the owner, id or creation time are dropped. There
    is no concurrency check: the last write wins. Returns None when the
    listing does not exist.
    """
    listing = db.session.get(Listing, listing_id, populate_existing=True) if listing_id else None
    if listing is None:
        return None

    for key, value in updates.items():
        if key in Listing.UPDATABLE_FIELDS:
            setattr(listing, key, value)

    document_store.commit(LISTINGS_COLLECTION)
    return get_listing(listing_id)


def delete_listing(listing_id):
    """Delete a listing; always reports success, missing ids included."""
    if listing_id:
        db.session.execute(db.delete(Listing).where(Listing.id == listing_id))
        document_store.commit(LISTINGS_COLLECTION)
        logger.info(f'Listing {listing_id} deleted')
    return True


def approve_listing(listing_id):
    return update_listing(listing_id, {
        'status': ListingStatus.ACTIVE,
        'rejection_reason': None,
    })


def reject_listing(listing_id, reason):
    """Reject a listing; a non-blank reason is required and stored verbatim."""
    if not reason or not str(reason).strip():
        raise RequiredFieldError('rejection_reason', 'A reason is required to reject a listing.')
    return update_listing(listing_id, {
        'status': ListingStatus.REJECTED,
        'rejection_reason': reason,
    })
