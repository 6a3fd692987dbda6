"""Document store over the SQLAlchemy models.

Listings and messages are read and written as collections of documents:
queries are equality filters plus an optional sort and limit, every
document leaves this module as a plain dict with its timestamps already
in epoch milliseconds, and every commit announces the touched
collections on the change feed.
"""

from contextlib import contextmanager
import logging

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from classifieds import db
from classifieds.models import COLLECTIONS

logger = logging.getLogger(__name__)

ASCENDING = 'asc'
DESCENDING = 'desc'

# Fields that may appear in where()/order_by() per collection
QUERYABLE_FIELDS = {
    'listings': {'id', 'status', 'user_id', 'category', 'subcategory', 'created_at'},
    'messages': {'id', 'listing_id', 'sender_id', 'receiver_id', 'read', 'timestamp'},
}


class InvalidQuery(ValueError):
    """A query named an unknown collection or a field that cannot be queried."""


class Query:
    """Immutable description of a collection query.

    Usage:
        Query('listings').where('status', 'active').order_by('created_at', DESCENDING)
    """

    def __init__(self, collection, filters=(), order=None, limit_to=None):
        if collection not in COLLECTIONS:
            raise InvalidQuery(f'Unknown collection: {collection}')
        self.collection = collection
        self.filters = tuple(filters)
        self.order = order
        self.limit_to = limit_to

    def _check_field(self, field):
        if field not in QUERYABLE_FIELDS[self.collection]:
            raise InvalidQuery(f'Field {field!r} is not queryable on {self.collection}')

    def where(self, field, value):
        self._check_field(field)
        return Query(self.collection, self.filters + ((field, value),), self.order, self.limit_to)

    def order_by(self, field, direction=ASCENDING):
        self._check_field(field)
        if direction not in (ASCENDING, DESCENDING):
            raise InvalidQuery(f'Unknown sort direction: {direction}')
        return Query(self.collection, self.filters, (field, direction), self.limit_to)

    def limit(self, count):
        if count is not None and (not isinstance(count, int) or count < 1):
            raise InvalidQuery('limit must be a positive integer')
        return Query(self.collection, self.filters, self.order, count)

    @property
    def model(self):
        return COLLECTIONS[self.collection]

    def _filtered(self):
        model = self.model
        statement = db.select(model)
        for field, value in self.filters:
            statement = statement.where(getattr(model, field) == value)
        return statement

    def to_select(self):
        statement = self._filtered()
        if self.order:
            field, direction = self.order
            column = getattr(self.model, field)
            statement = statement.order_by(column.desc() if direction == DESCENDING else column.asc())
        if self.limit_to:
            statement = statement.limit(self.limit_to)
        return statement

    def to_count(self):
        model = self.model
        statement = db.select(func.count()).select_from(model)
        for field, value in self.filters:
            statement = statement.where(getattr(model, field) == value)
        return statement

    def __repr__(self):
        return f'<Query {self.collection} where={dict(self.filters)} order={self.order} limit={self.limit_to}>'


def _execute(query):
    # Other sessions may have committed since these rows were last loaded
    statement = query.to_select().execution_options(populate_existing=True)
    return db.session.execute(statement).scalars().all()


def fetch(query):
    """Run a query and return its documents as dicts."""
    try:
        rows = _execute(query)
    except SQLAlchemyError:
        db.session.rollback()
        raise
    return [row.to_dict() for row in rows]


def fetch_models(query):
    """Run a query and return model instances (for writers)."""
    try:
        return _execute(query)
    except SQLAlchemyError:
        db.session.rollback()
        raise


def get(collection_name, doc_id):
    """Get one document by id, or None when it does not exist."""
    if not doc_id:
        return None
    model = COLLECTIONS[collection_name]
    try:
        row = db.session.get(model, doc_id, populate_existing=True)
    except SQLAlchemyError:
        db.session.rollback()
        raise
    return row.to_dict() if row else None


def count(query):
    """Exact document count computed by the database."""
    try:
        return db.session.execute(query.to_count()).scalar_one()
    except SQLAlchemyError:
        db.session.rollback()
        raise


def commit(*collections):
    """Commit the session and announce the touched collections."""
    from classifieds.services.change_feed import feed

    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
    feed.publish(*collections)


@contextmanager
def batch(*collections):
    """Atomic multi-document write: everything inside commits as one unit.

    Usage:
        with batch('messages'):
            for message in unread:
                message.read = True
    """
    try:
        yield db.session
    except Exception:
        db.session.rollback()
        raise
    commit(*collections)
