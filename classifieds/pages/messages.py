"""My chats overview: one live preview per listing the user talked about."""

from functools import partial
import logging

from classifieds.pages.base import Page, placeholder_image
from classifieds.services import chat_service, listing_service

logger = logging.getLogger(__name__)


def preview_sort_key(preview):
    """Unread chats first, then newest last message, then chats without messages."""
    timestamp = preview['last_message_timestamp']
    return (
        preview['unread_count'] == 0,
        timestamp is None,
        -(timestamp or 0),
    )


class MessagesPage(Page):
    """Chat previews for the current user.

    The listing ids are read once; after that each listing gets its own
    live query over its messages. A new chat started elsewhere shows up
    after the page is reopened or the user changes.
    """

    name = 'messages'

    def __init__(self, **kwargs):
        self._previews = {}
        super().__init__(**kwargs)

    def initial_state(self):
        return {'loading': True, 'error': None, 'chats': []}

    def load(self):
        self._previews = {}
        if not self.user_id:
            self.set_state(chats=[], loading=False)
            return

        try:
            listing_ids = chat_service.get_chat_listing_ids(self.user_id)
            for listing_id in listing_ids:
                listing = listing_service.get_listing(listing_id)
                if not listing:
                    continue
                self.subscribe(
                    chat_service.listing_messages_query(listing_id),
                    partial(self._on_chat, listing),
                    partial(self._on_chat_error, listing_id),
                )
        except Exception as e:
            logger.error(f'Failed to load chats for {self.user_id}: {e}')
            self._teardown()
            self.set_state(error=self.t('chats_load_failed'), loading=False)
            return

        self.set_state(loading=False)

    def _on_chat(self, listing, documents):
        messages = chat_service.filter_participants(documents, self.user_id)
        last_message, unread_count = chat_service.summarize_chat(messages, self.user_id)
        images = listing.get('images') or []

        self._previews[listing['id']] = {
            'listing_id': listing['id'],
            'listing_title': listing.get('title'),
            'listing_image': images[0] if images else placeholder_image(listing['id']),
            'last_message_text': last_message['text'] if last_message else self.t('no_messages'),
            'last_message_timestamp': last_message['timestamp'] if last_message else None,
            'last_message_sender_id': last_message['sender_id'] if last_message else None,
            'unread_count': unread_count,
        }
        self.set_state(chats=sorted(self._previews.values(), key=preview_sort_key))

    def _on_chat_error(self, listing_id, exc):
        logger.error(f'Error fetching messages for listing {listing_id}: {exc}')

    @property
    def total_unread(self):
        return sum(preview['unread_count'] for preview in self._previews.values())

    def to_dict(self):
        data = super().to_dict()
        data['total_unread'] = self.total_unread
        return data
