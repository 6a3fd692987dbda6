"""Base class for server-side page controllers.

A page binds repositories and live queries to local state, the way a UI
page component does. The current user is always passed in explicitly;
changing it tears down every live query and opens them again for the
new user, so no callback of the old scope can write into the state.
"""

import logging

from flask import current_app, has_app_context

from classifieds.constants.categories import get_category_name, get_subcategory_name
from classifieds.constants.messages import translate
from classifieds.services.change_feed import feed as default_feed

logger = logging.getLogger(__name__)


class UnknownAction(LookupError):
    """A page was asked to perform an action it does not expose."""


class Page:
    name = None
    admin_only = False
    # Methods callable through page_action
    ACTIONS = ()
    # Constructor arguments a client may pass when opening the page
    PARAMS = ()

    def __init__(self, user_id=None, on_change=None, locale=None, feed=None):
        self.user_id = user_id or None
        self.on_change = on_change
        self.locale = locale
        self.feed = feed or default_feed
        self.mounted = False
        self.state = self.initial_state()
        self._subscriptions = []

    def initial_state(self):
        return {'loading': True, 'error': None}

    def load(self):
        """Open live queries and one-shot reads; called on mount and user change."""
        raise NotImplementedError

    def mount(self):
        self.mounted = True
        self.load()
        return self

    def unmount(self):
        self._teardown()
        self.mounted = False

    def render(self):
        """Mount, capture the first full state and unmount again."""
        self.mount()
        try:
            return self.to_dict()
        finally:
            self.unmount()

    def set_user(self, user_id):
        user_id = user_id or None
        if user_id == self.user_id:
            return
        self._teardown()
        self.user_id = user_id
        self.state = self.initial_state()
        if self.mounted:
            self.load()
            self._notify()

    def perform(self, action, *args, **kwargs):
        if action not in self.ACTIONS:
            raise UnknownAction(action)
        return getattr(self, action)(*args, **kwargs)

    # Subscriptions

    def subscribe(self, query, on_snapshot, on_error=None):
        subscription = self.feed.subscribe(query, on_snapshot, on_error or self.on_subscription_error)
        self._subscriptions.append(subscription)
        return subscription

    def cancel(self, subscription):
        if subscription is None:
            return
        subscription.cancel()
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    def _teardown(self):
        for subscription in self._subscriptions:
            subscription.cancel()
        self._subscriptions = []

    @property
    def subscription_count(self):
        return len(self._subscriptions)

    def on_subscription_error(self, exc):
        # Live updates stop silently; the state keeps its last snapshot
        logger.error(f'{self.name} page live query failed: {exc}')

    # State

    def set_state(self, **changes):
        self.state.update(changes)
        self._notify()

    def _notify(self):
        if self.on_change and self.mounted:
            self.on_change(self.to_dict())

    def to_dict(self):
        data = {'page': self.name, 'user_id': self.user_id}
        data.update(self.state)
        return data

    def t(self, key, **params):
        return translate(key, self.locale, **params)


def format_price(price):
    """Price as shown to buyers: uk-UA digit grouping plus the currency symbol."""
    if price is None:
        return None
    symbol = '₴'
    if has_app_context():
        symbol = current_app.config.get('CURRENCY_SYMBOL', symbol)
    amount = f'{price:,.2f}'
    if amount.endswith('.00'):
        amount = amount[:-3]
    elif amount.endswith('0'):
        amount = amount[:-1]
    amount = amount.replace(',', '\u00a0').replace('.', ',')
    return f'{amount} {symbol}'


def describe_listing(listing):
    """Listing dict with display names for its category ids and its price."""
    described = dict(listing)
    described['price_display'] = format_price(listing.get('price'))
    described['category_name'] = get_category_name(listing.get('category'))
    described['subcategory_name'] = get_subcategory_name(listing.get('category'), listing.get('subcategory'))
    return described


def placeholder_image(listing_id):
    base = 'https://picsum.photos/seed/'
    if has_app_context():
        base = current_app.config.get('PLACEHOLDER_IMAGE_URL', base)
    return f'{base}{listing_id}'
