"""Database models for the classifieds application."""

from .listing import Listing, ListingStatus
from .message import Message

# Collection name -> model, used by the document store and change feed
COLLECTIONS = {
    Listing.__tablename__: Listing,
    Message.__tablename__: Message,
}

__all__ = ['Listing', 'ListingStatus', 'Message', 'COLLECTIONS']
