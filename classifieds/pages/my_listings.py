"""My listings: the owner's listings grouped by moderation status."""

import logging

from classifieds.models import ListingStatus
from classifieds.pages.base import Page, describe_listing
from classifieds.services import listing_service

logger = logging.getLogger(__name__)

TABS = (ListingStatus.ACTIVE, ListingStatus.PENDING, ListingStatus.REJECTED)


class MyListingsPage(Page):
    name = 'my_listings'
    ACTIONS = ('select_tab', 'delete_listing')
    PARAMS = ('tab',)

    def __init__(self, tab=ListingStatus.ACTIVE, **kwargs):
        self.tab = tab if tab in TABS else ListingStatus.ACTIVE
        self._listings = []
        super().__init__(**kwargs)

    def initial_state(self):
        return {
            'loading': True,
            'error': None,
            'tab': self.tab,
            'listings': [],
            'counts': {tab: 0 for tab in TABS},
            'deleting': False,
        }

    def load(self):
        self._listings = []
        if not self.user_id:
            self.set_state(listings=[], error=self.t('user_unknown'), loading=False)
            return
        self.subscribe(
            listing_service.listings_by_user_query(self.user_id),
            self._on_listings,
            self._on_listings_error,
        )

    def _on_listings(self, listings):
        self._listings = listings
        self.set_state(loading=False, **self._derived())

    def _on_listings_error(self, exc):
        logger.error(f'Error fetching listings of {self.user_id}: {exc}')
        self.set_state(error=self.t('listings_load_failed'), loading=False)

    def _derived(self):
        counts = {tab: 0 for tab in TABS}
        for listing in self._listings:
            if listing['status'] in counts:
                counts[listing['status']] += 1
        listings = [describe_listing(l) for l in self._listings if l['status'] == self.tab]
        return {'listings': listings, 'counts': counts, 'tab': self.tab}

    def select_tab(self, tab):
        if tab not in TABS:
            return False
        self.tab = tab
        self.set_state(**self._derived())
        return True

    def delete_listing(self, listing_id):
        """Delete one of the user's own listings; the live query drops it."""
        if not any(l['id'] == listing_id for l in self._listings):
            return False

        self.set_state(deleting=True)
        try:
            return listing_service.delete_listing(listing_id)
        except Exception as e:
            logger.error(f'Failed to delete listing {listing_id}: {e}')
            self.set_state(error=self.t('listing_delete_failed'))
            return False
        finally:
            self.set_state(deleting=False)
