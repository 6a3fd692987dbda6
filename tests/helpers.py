"""
Test data builders shared by the test modules.
"""

from faker import Faker

from classifieds import db
from classifieds.models import Listing, ListingStatus, Message

fake = Faker()

ADMIN_ID = 'admin-user'
ADMIN_SECRET = 'test-admin-secret'


def new_user_id():
    return f'user-{fake.uuid4()}'


def user_headers(user_id):
    return {'X-User-Id': user_id}


def listing_form(**overrides):
    """Valid listing form data."""
    data = {
        'title': fake.sentence(nb_words=4),
        'description': fake.paragraph(),
        'price': round(fake.pyfloat(min_value=10, max_value=5000, right_digits=2), 2),
        'category': 'electronics',
        'subcategory': 'phones',
        'images': [fake.image_url()],
    }
    data.update(overrides)
    return data


def make_listing(user_id, status=ListingStatus.ACTIVE, **overrides):
    """Insert a listing directly, bypassing moderation; returns its id."""
    data = listing_form(**overrides)
    data.pop('user_id', None)
    listing = Listing(user_id=user_id, status=status, **data)
    db.session.add(listing)
    db.session.commit()
    return listing.id


def make_message(listing_id, sender_id, receiver_id, text=None, read=False, **overrides):
    """Insert a message directly; returns its id."""
    message = Message(
        listing_id=listing_id,
        sender_id=sender_id,
        receiver_id=receiver_id,
        text=text or fake.sentence(),
        read=read,
        **overrides,
    )
    db.session.add(message)
    db.session.commit()
    return message.id
