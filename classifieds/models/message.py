"""Message model for listing chats."""

from classifieds import db
from classifieds.models.listing import new_document_id
from classifieds.utils.timestamps import server_timestamp, to_millis


class Message(db.Model):
    """A single chat message about a listing.

    There is no conversation table: a chat is every message sharing a
    listing id, narrowed to the two participants.
    """

    __tablename__ = 'messages'

    id = db.Column(db.String(32), primary_key=True, default=new_document_id)
    listing_id = db.Column(db.String(32), nullable=False, index=True)
    sender_id = db.Column(db.String(64), nullable=False, index=True)
    receiver_id = db.Column(db.String(64), nullable=False, index=True)
    text = db.Column(db.Text, nullable=False, default='')
    timestamp = db.Column(db.DateTime, default=server_timestamp, nullable=False, index=True)
    read = db.Column(db.Boolean, default=False, nullable=False)

    def to_dict(self):
        """Convert message to dictionary, with timestamp in epoch milliseconds."""
        return {
            'id': self.id,
            'listing_id': self.listing_id,
            'sender_id': self.sender_id,
            'receiver_id': self.receiver_id,
            'text': self.text,
            'timestamp': to_millis(self.timestamp),
            'read': self.read,
        }

    def __repr__(self):
        return f'<Message {self.id} on Listing {self.listing_id}>'
