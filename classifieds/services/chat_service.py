"""Chat repository: messages exchanged about listings."""

import logging

from classifieds import db
from classifieds.models import Message
from classifieds.services import document_store
from classifieds.services.document_store import ASCENDING, Query
from classifieds.utils.errors import RequiredFieldError
from classifieds.utils.timestamps import now_millis

logger = logging.getLogger(__name__)

MESSAGES_COLLECTION = 'messages'


def listing_messages_query(listing_id, direction=ASCENDING):
    return Query(MESSAGES_COLLECTION).where('listing_id', listing_id).order_by('timestamp', direction)


def unread_query(user_id, listing_id=None):
    query = Query(MESSAGES_COLLECTION).where('receiver_id', user_id).where('read', False)
    if listing_id:
        query = query.where('listing_id', listing_id)
    return query


def filter_participants(messages, user_id, other_user_id=None):
    """Narrow a listing's messages to those one user (and optionally a peer) takes part in.

    The store has no "sender OR receiver" filter, so listing queries are
    narrowed here. This reads every message of the listing and is only
    meant for listing-sized chats.
    """
    if other_user_id is None:
        return [m for m in messages if user_id in (m['sender_id'], m['receiver_id'])]
    pair = {user_id, other_user_id}
    return [
        m for m in messages
        if {m['sender_id'], m['receiver_id']} == pair
    ]


def get_messages_for_listing(listing_id, current_user_id):
    """Messages about a listing that the user sent or received, oldest first."""
    if not current_user_id:
        return []
    messages = document_store.fetch(listing_messages_query(listing_id))
    return filter_participants(messages, current_user_id)


def send_message(listing_id, sender_id, receiver_id, text):
    """Store a new unread message and return an optimistic copy.

    The returned timestamp is the local wall clock; the stored one is
    assigned by the store and arrives through live queries.
    """
    if not sender_id or not receiver_id:
        raise RequiredFieldError(
            'sender_id' if not sender_id else 'receiver_id',
            'Sender and Receiver ID are required to send a message.',
        )

    message = Message(
        listing_id=listing_id,
        sender_id=sender_id,
        receiver_id=receiver_id,
        text=text,
        read=False,
    )
    db.session.add(message)
    document_store.commit(MESSAGES_COLLECTION)
    logger.info(f'Message {message.id} sent on listing {listing_id}')

    result = message.to_dict()
    result['timestamp'] = now_millis()
    return result


def mark_messages_read(listing_id, reader_id):
    """Flip every unread message addressed to the reader on a listing.

    All flips are written in one batch. Messages the reader sent are never
    touched.

    Returns:
        int: number of messages marked read.
    """
    if not reader_id:
        return 0

    unread = document_store.fetch_models(unread_query(reader_id, listing_id))
    if not unread:
        return 0

    with document_store.batch(MESSAGES_COLLECTION):
        for message in unread:
            message.read = True

    logger.debug(f'Marked {len(unread)} message(s) read on listing {listing_id} for {reader_id}')
    return len(unread)


def count_unread_for_user(user_id, listing_id=None):
    """Count unread messages addressed to a user, optionally for one listing."""
    if not user_id:
        return 0
    return document_store.count(unread_query(user_id, listing_id))


def get_chat_listing_ids(user_id):
    """Distinct listing ids the user has sent or received a message about."""
    if not user_id:
        return []

    sent = db.session.execute(
        db.select(Message.listing_id).where(Message.sender_id == user_id).distinct()
    ).scalars().all()
    received = db.session.execute(
        db.select(Message.listing_id).where(Message.receiver_id == user_id).distinct()
    ).scalars().all()

    listing_ids = []
    for listing_id in list(sent) + list(received):
        if listing_id not in listing_ids:
            listing_ids.append(listing_id)
    return listing_ids


def summarize_chat(messages, user_id):
    """Derive last message and unread count from a full chat snapshot."""
    ordered = sorted(messages, key=lambda m: m['timestamp'] or 0)
    last_message = ordered[-1] if ordered else None
    unread_count = sum(1 for m in ordered if m['receiver_id'] == user_id and not m['read'])
    return last_message, unread_count
