"""Admin pages: dashboard, moderation queue and listing management."""

import logging

from classifieds.models import ListingStatus
from classifieds.pages.base import Page, describe_listing
from classifieds.services import listing_service
from classifieds.utils.errors import RequiredFieldError

logger = logging.getLogger(__name__)

RECENT_PENDING_LIMIT = 5


class AdminDashboardPage(Page):
    """Listing counts plus the newest pending submissions.

    Counts come from the store's count operation. They are re-read on
    demand and whenever anything in the listings collection changes; the
    pending count is also taken from the size of each pending snapshot.
    """

    name = 'admin_dashboard'
    admin_only = True
    ACTIONS = ('refresh',)

    def initial_state(self):
        return {'loading': True, 'error': None, 'stats': None, 'recent_pending': []}

    def load(self):
        self.refresh()
        self.subscribe(
            listing_service.listings_by_status_query(ListingStatus.PENDING),
            self._on_pending,
            self._on_pending_error,
        )
        self.subscribe(listing_service.all_listings_query(), self._on_any_change)

    def refresh(self):
        try:
            stats = {
                'total_active': listing_service.count_listings(ListingStatus.ACTIVE),
                'total_pending': listing_service.count_listings(ListingStatus.PENDING),
                'total_rejected': listing_service.count_listings(ListingStatus.REJECTED),
                'total_listings': listing_service.count_listings(),
            }
        except Exception as e:
            logger.error(f'Error fetching admin dashboard counts: {e}')
            self.set_state(loading=False)
            return None
        self.set_state(stats=stats, loading=False)
        return stats

    def _on_pending(self, listings):
        stats = self.state.get('stats')
        if stats is not None:
            stats = dict(stats, total_pending=len(listings))
        self.set_state(
            recent_pending=[describe_listing(l) for l in listings[:RECENT_PENDING_LIMIT]],
            stats=stats,
            loading=False,
        )

    def _on_pending_error(self, exc):
        logger.error(f'Error fetching recent pending listings: {exc}')
        self.set_state(loading=False)

    def _on_any_change(self, listings):
        self.refresh()


class AdminModerationPage(Page):
    """Live queue of pending listings with approve and reject."""

    name = 'admin_moderation'
    admin_only = True
    ACTIONS = ('approve', 'reject')

    def initial_state(self):
        return {'loading': True, 'error': None, 'listings': []}

    def load(self):
        self.subscribe(
            listing_service.listings_by_status_query(ListingStatus.PENDING),
            self._on_pending,
        )

    def _on_pending(self, listings):
        self.set_state(listings=[describe_listing(l) for l in listings], loading=False)

    def approve(self, listing_id):
        try:
            listing = listing_service.approve_listing(listing_id)
        except Exception as e:
            logger.error(f'Failed to approve listing {listing_id}: {e}')
            self.set_state(error=self.t('moderation_failed'))
            return None
        self.set_state(error=None)
        return listing

    def reject(self, listing_id, reason=None):
        """Reject with a reason; a blank reason is refused without writing."""
        if not reason or not str(reason).strip():
            self.set_state(error=self.t('reject_reason_required'))
            return None
        try:
            listing = listing_service.reject_listing(listing_id, reason)
        except RequiredFieldError as e:
            self.set_state(error=e.localized(self.locale))
            return None
        except Exception as e:
            logger.error(f'Failed to reject listing {listing_id}: {e}')
            self.set_state(error=self.t('moderation_failed'))
            return None
        self.set_state(error=None)
        return listing


class AdminListingsPage(Page):
    """Every listing, newest first, filterable by status."""

    name = 'admin_listings'
    admin_only = True
    ACTIONS = ('select_tab', 'delete_listing')
    PARAMS = ('tab',)

    def __init__(self, tab=None, **kwargs):
        self.tab = tab if tab in ListingStatus.ALL else None
        self._listings = []
        super().__init__(**kwargs)

    def initial_state(self):
        return {
            'loading': True,
            'error': None,
            'tab': self.tab,
            'listings': [],
            'counts': {status: 0 for status in ListingStatus.ALL},
            'total': 0,
        }

    def load(self):
        self.subscribe(listing_service.all_listings_query(), self._on_listings)

    def _on_listings(self, listings):
        self._listings = listings
        self.set_state(loading=False, **self._derived())

    def _derived(self):
        counts = {status: 0 for status in ListingStatus.ALL}
        for listing in self._listings:
            if listing['status'] in counts:
                counts[listing['status']] += 1
        listings = [
            describe_listing(l) for l in self._listings
            if self.tab is None or l['status'] == self.tab
        ]
        return {'listings': listings, 'counts': counts, 'total': len(self._listings), 'tab': self.tab}

    def select_tab(self, tab=None):
        if tab is not None and tab not in ListingStatus.ALL:
            return False
        self.tab = tab
        self.set_state(**self._derived())
        return True

    def delete_listing(self, listing_id):
        try:
            return listing_service.delete_listing(listing_id)
        except Exception as e:
            logger.error(f'Failed to delete listing {listing_id}: {e}')
            self.set_state(error=self.t('listing_delete_failed'))
            return False
