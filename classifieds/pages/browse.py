"""Browse page: live feed of active listings."""

from classifieds.models import ListingStatus
from classifieds.pages.base import Page, describe_listing
from classifieds.services.listing_service import listings_by_status_query


class BrowsePage(Page):
    """Active listings, newest first, with optional local filters.

    Filters are applied to each full snapshot, so changing them never
    reopens the live query.
    """

    name = 'browse'
    ACTIONS = ('set_filter',)
    PARAMS = ('category', 'subcategory', 'search')

    def __init__(self, category=None, subcategory=None, search=None, **kwargs):
        self.filters = {'category': category, 'subcategory': subcategory, 'search': search}
        self._snapshot = []
        super().__init__(**kwargs)

    def initial_state(self):
        return {
            'loading': True,
            'error': None,
            'listings': [],
            'total_active': 0,
            'filters': dict(self.filters),
        }

    def load(self):
        self.subscribe(listings_by_status_query(ListingStatus.ACTIVE), self._on_listings)

    def _on_listings(self, listings):
        self._snapshot = listings
        self.set_state(
            listings=self._apply_filters(listings),
            total_active=len(listings),
            loading=False,
        )

    def _apply_filters(self, listings):
        category = self.filters.get('category')
        subcategory = self.filters.get('subcategory')
        search = (self.filters.get('search') or '').strip().lower()

        matched = []
        for listing in listings:
            if category and listing.get('category') != category:
                continue
            if subcategory and listing.get('subcategory') != subcategory:
                continue
            if search:
                haystack = f"{listing.get('title') or ''} {listing.get('description') or ''}".lower()
                if search not in haystack:
                    continue
            matched.append(describe_listing(listing))
        return matched

    def set_filter(self, category=None, subcategory=None, search=None):
        self.filters = {'category': category, 'subcategory': subcategory, 'search': search}
        self.set_state(filters=dict(self.filters), listings=self._apply_filters(self._snapshot))
