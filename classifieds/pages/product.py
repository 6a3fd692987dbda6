"""Product page: one listing, live, with its embedded chat."""

import logging

from classifieds.pages.base import Page, describe_listing, placeholder_image
from classifieds.services import chat_service
from classifieds.services.listing_service import listing_query

logger = logging.getLogger(__name__)


class ProductPage(Page):
    """Live view of a single listing and the chat with its seller.

    The chat query only runs while a user is set, the listing is loaded,
    the user is not its owner and the chat is open. Every chat snapshot
    holding unread messages for the user marks them read.
    """

    name = 'product'
    ACTIONS = ('open_chat', 'close_chat', 'send_message')
    PARAMS = ('listing_id', 'open_chat')

    def __init__(self, listing_id=None, open_chat=False, **kwargs):
        self.listing_id = listing_id
        self._want_chat = bool(open_chat)
        self._chat_subscription = None
        self._chat_seller_id = None
        super().__init__(**kwargs)

    def initial_state(self):
        return {
            'loading': True,
            'error': None,
            'listing': None,
            'images': [],
            'is_own_listing': False,
            'chat_open': bool(self._want_chat and self.user_id),
            'messages': [],
            'loading_messages': False,
            'sending': False,
            'send_error': None,
        }

    def load(self):
        self._chat_subscription = None
        self._chat_seller_id = None
        if not self.listing_id:
            self.set_state(error=self.t('listing_id_missing'), loading=False)
            return
        self.subscribe(listing_query(self.listing_id), self._on_listing, self._on_listing_error)

    def _on_listing(self, documents):
        if not documents:
            self.set_state(listing=None, images=[], error=self.t('listing_not_found'), loading=False)
            self._sync_chat()
            return

        listing = documents[0]
        images = listing.get('images') or [placeholder_image(listing['id'])]
        self.set_state(
            listing=describe_listing(listing),
            images=images,
            is_own_listing=bool(self.user_id and listing.get('user_id') == self.user_id),
            error=None,
            loading=False,
        )
        self._sync_chat()

    def _on_listing_error(self, exc):
        logger.error(f'Error fetching listing {self.listing_id}: {exc}')
        self.set_state(error=self.t('listing_load_failed'), loading=False)

    @property
    def seller_id(self):
        listing = self.state.get('listing')
        return listing.get('user_id') if listing else None

    def _chat_allowed(self):
        return bool(
            self.user_id
            and self.seller_id
            and self.seller_id != self.user_id
            and self.state.get('chat_open')
        )

    def _sync_chat(self):
        if not self._chat_allowed():
            self.cancel(self._chat_subscription)
            self._chat_subscription = None
            self._chat_seller_id = None
            if self.state.get('is_own_listing') and self.state.get('messages'):
                self.set_state(messages=[])
            return

        if self._chat_subscription is not None and self._chat_seller_id == self.seller_id:
            return

        self.cancel(self._chat_subscription)
        self._chat_seller_id = self.seller_id
        self.set_state(loading_messages=True)
        self._chat_subscription = self.subscribe(
            chat_service.listing_messages_query(self.listing_id),
            self._on_messages,
            self._on_messages_error,
        )

    def _on_messages(self, documents):
        messages = chat_service.filter_participants(documents, self.user_id, self._chat_seller_id)
        self.set_state(messages=messages, loading_messages=False)
        if any(m['receiver_id'] == self.user_id and not m['read'] for m in messages):
            chat_service.mark_messages_read(self.listing_id, self.user_id)

    def _on_messages_error(self, exc):
        logger.error(f'Error fetching messages for listing {self.listing_id}: {exc}')
        self.set_state(loading_messages=False)

    def open_chat(self):
        if not self.user_id:
            return False
        self._want_chat = True
        self.set_state(chat_open=True)
        self._sync_chat()
        return True

    def close_chat(self):
        self._want_chat = False
        self.set_state(chat_open=False)
        self._sync_chat()

    def send_message(self, text):
        """Send a chat message to the seller; returns the optimistic record or None."""
        text = (text or '').strip()
        if not text or not self.user_id or not self.seller_id or self.seller_id == self.user_id:
            return None

        self.set_state(sending=True, send_error=None)
        try:
            return chat_service.send_message(self.listing_id, self.user_id, self.seller_id, text)
        except Exception as e:
            logger.error(f'Failed to send message on listing {self.listing_id}: {e}')
            self.set_state(send_error=self.t('message_send_failed'))
            return None
        finally:
            self.set_state(sending=False)
