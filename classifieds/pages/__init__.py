"""Server-side page controllers.

Each page holds the state of one UI route and keeps it current through
live queries on the change feed.
"""

from .base import Page, UnknownAction
from .browse import BrowsePage
from .product import ProductPage
from .messages import MessagesPage
from .my_listings import MyListingsPage
from .admin import AdminDashboardPage, AdminModerationPage, AdminListingsPage
from .listing_form import CreateListingForm, EditListingForm, validate_listing_form

PAGES = {
    page.name: page
    for page in (
        BrowsePage,
        ProductPage,
        MessagesPage,
        MyListingsPage,
        AdminDashboardPage,
        AdminModerationPage,
        AdminListingsPage,
    )
}

__all__ = [
    'Page',
    'UnknownAction',
    'PAGES',
    'BrowsePage',
    'ProductPage',
    'MessagesPage',
    'MyListingsPage',
    'AdminDashboardPage',
    'AdminModerationPage',
    'AdminListingsPage',
    'CreateListingForm',
    'EditListingForm',
    'validate_listing_form',
]
