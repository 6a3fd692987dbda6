"""Listing model for the classifieds marketplace."""

import uuid

from classifieds import db
from classifieds.utils.timestamps import server_timestamp, to_millis


class ListingStatus:
    """Moderation status values."""

    PENDING = 'pending'
    ACTIVE = 'active'
    REJECTED = 'rejected'

    ALL = (PENDING, ACTIVE, REJECTED)


def new_document_id():
    return uuid.uuid4().hex


class Listing(db.Model):
    """A seller's product advertisement."""

    __tablename__ = 'listings'

    id = db.Column(db.String(32), primary_key=True, default=new_document_id)
    title = db.Column(db.String(255), nullable=True)
    description = db.Column(db.Text, nullable=True)
    price = db.Column(db.Float, nullable=True)
    category = db.Column(db.String(50), nullable=True, index=True)
    subcategory = db.Column(db.String(50), nullable=True)
    images = db.Column(db.JSON, nullable=True)  # list of URLs
    user_id = db.Column(db.String(64), nullable=False, index=True)
    status = db.Column(db.String(20), default=ListingStatus.PENDING, nullable=False, index=True)
    rejection_reason = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=server_timestamp, nullable=False, index=True)
    contact_info = db.Column(db.String(255), nullable=True)

    # Fields a generic update may touch; id, owner and creation time are fixed
    UPDATABLE_FIELDS = (
        'title', 'description', 'price', 'category', 'subcategory',
        'images', 'status', 'rejection_reason', 'contact_info',
    )

    def to_dict(self):
        """Convert listing to dictionary, with created_at in epoch milliseconds."""
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'price': self.price,
            'category': self.category,
            'subcategory': self.subcategory,
            'images': list(self.images or []),
            'user_id': self.user_id,
            'status': self.status,
            'rejection_reason': self.rejection_reason,
            'created_at': to_millis(self.created_at),
            'contact_info': self.contact_info,
        }

    def __repr__(self):
        return f'<Listing {self.id}: {self.title} [{self.status}]>'
