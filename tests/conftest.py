"""
Pytest configuration and fixtures for testing the Classifieds API.
"""

import os
import sys
import pytest

# Add the parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from classifieds import create_app, db, socketio
from classifieds.models import ListingStatus
from classifieds.services.change_feed import feed
from classifieds.socket_events import live_queries, open_pages
from tests.helpers import ADMIN_ID, ADMIN_SECRET, make_listing, new_user_id


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app('testing', overrides={
        'ADMIN_SECRET': ADMIN_SECRET,
        'ADMIN_USER_IDS': [ADMIN_ID],
        'DEFAULT_LOCALE': 'ru',
    })

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.drop_all()


@pytest.fixture(scope='function')
def db_session(app):
    """Empty every collection and drop every live query for each test."""
    with app.app_context():
        for table in reversed(db.metadata.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()
        feed.clear()
        open_pages.clear()
        live_queries.clear()
        yield db.session
        db.session.rollback()
        feed.clear()


@pytest.fixture(scope='function')
def client(app, db_session):
    """Create test client for each test function."""
    return app.test_client()


@pytest.fixture
def socket_client(app, client):
    """Socket.IO test client sharing the Flask test client."""
    sio = socketio.test_client(app, flask_test_client=client)
    yield sio
    if sio.is_connected():
        sio.disconnect()


@pytest.fixture
def seller_id():
    return new_user_id()


@pytest.fixture
def buyer_id():
    return new_user_id()


@pytest.fixture
def admin_headers():
    return {'X-User-Id': ADMIN_ID}


@pytest.fixture
def secret_headers():
    """Admin access through the shared secret instead of the whitelist."""
    return {'X-User-Id': new_user_id(), 'X-Admin-Secret': ADMIN_SECRET}


@pytest.fixture
def active_listing(db_session, seller_id):
    """An approved listing owned by the seller."""
    return make_listing(seller_id, ListingStatus.ACTIVE)


@pytest.fixture
def pending_listing(db_session, seller_id):
    return make_listing(seller_id, ListingStatus.PENDING)
