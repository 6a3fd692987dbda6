"""Create and edit forms for listings.

Creating always files the listing under the current user in pending
state. Editing by the owner sends the listing back to moderation no
matter what changed; an admin edit keeps whatever status it submits,
as long as a rejected listing ends up with a reason.
"""

import logging
import math

from classifieds.constants.categories import validate_category
from classifieds.constants.messages import translate
from classifieds.models import ListingStatus
from classifieds.services import listing_service
from classifieds.utils.errors import RequiredFieldError, ValidationError

logger = logging.getLogger(__name__)

FORM_FIELDS = ('title', 'description', 'price', 'category', 'subcategory', 'images', 'contact_info')
REQUIRED_FIELDS = ('title', 'description', 'price', 'category')


def _clean_text(value):
    if value is None:
        return None
    return str(value).strip()


def _clean_images(value):
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    return [str(image) for image in value if image]


def validate_listing_form(data, current=None, locale=None):
    """Check and normalize submitted form fields.

    With ``current`` (the stored listing) only the submitted fields are
    checked, which lets edits be partial.

    Returns:
        dict: cleaned fields, limited to FORM_FIELDS.

    Raises:
        ValidationError: with one localized message per problem.
    """
    partial = current is not None
    errors = []
    cleaned = {}

    def wanted(field):
        return field in data or (not partial and field in REQUIRED_FIELDS)

    for field, message_key in (('title', 'title_required'), ('description', 'description_required')):
        if wanted(field):
            value = _clean_text(data.get(field))
            if not value:
                errors.append(translate(message_key, locale))
            else:
                cleaned[field] = value

    if wanted('price'):
        price = data.get('price')
        try:
            if isinstance(price, bool):
                raise TypeError('price must be a number')
            price = float(price)
        except (TypeError, ValueError):
            price = None
        if price is None or not math.isfinite(price) or price < 0:
            errors.append(translate('price_invalid', locale))
        else:
            cleaned['price'] = price

    if wanted('category') or 'subcategory' in data:
        category = data.get('category', (current or {}).get('category'))
        subcategory = data.get('subcategory', (current or {}).get('subcategory')) or None
        if not validate_category(category, subcategory):
            errors.append(translate('category_invalid', locale))
        else:
            cleaned['category'] = category
            cleaned['subcategory'] = subcategory

    if 'images' in data:
        cleaned['images'] = _clean_images(data.get('images'))

    if 'contact_info' in data:
        cleaned['contact_info'] = _clean_text(data.get('contact_info')) or None

    if errors:
        raise ValidationError(errors)
    return cleaned


class CreateListingForm:
    """New listing for the current user."""

    def __init__(self, user_id, locale=None):
        self.user_id = user_id
        self.locale = locale

    def submit(self, form_data):
        if not self.user_id:
            raise RequiredFieldError('user_id', 'User ID is required to create a listing.')
        cleaned = validate_listing_form(form_data or {}, locale=self.locale)
        cleaned.setdefault('images', [])
        # The owner is always the context user, whatever the form says
        cleaned['user_id'] = self.user_id
        return listing_service.create_listing(cleaned)


class EditListingForm:
    """Edit an existing listing as its owner or as an admin.

    Usage:
        form = EditListingForm(listing_id, user_id=current_user_id)
        if form.load() is None:
            ...  # form.error_key says why
        updated = form.submit(request_data)
    """

    def __init__(self, listing_id, user_id=None, is_admin=False, locale=None):
        self.listing_id = listing_id
        self.user_id = user_id
        self.is_admin = is_admin
        self.locale = locale
        self.listing = None
        self.error_key = None

    @property
    def error(self):
        return translate(self.error_key, self.locale) if self.error_key else None

    def load(self):
        """Fetch the listing and check the right to edit it."""
        self.listing = None
        self.error_key = None

        if not self.listing_id:
            self.error_key = 'listing_id_missing'
            return None
        if not self.user_id and not self.is_admin:
            self.error_key = 'user_required'
            return None

        listing = listing_service.get_listing(self.listing_id)
        if listing is None:
            self.error_key = 'listing_not_found'
            return None
        if not self.is_admin and listing['user_id'] != self.user_id:
            self.error_key = 'no_edit_rights'
            return None

        self.listing = listing
        return listing

    def submit(self, form_data):
        """Validate and write the edit; returns the re-read listing."""
        if self.listing is None and self.load() is None:
            return None

        form_data = form_data or {}
        updates = validate_listing_form(form_data, current=self.listing, locale=self.locale)

        if self.is_admin:
            status = form_data.get('status')
            if status in ListingStatus.ALL:
                updates['status'] = status
            if 'rejection_reason' in form_data:
                updates['rejection_reason'] = _clean_text(form_data.get('rejection_reason')) or None

            status = updates.get('status', self.listing['status'])
            if status == ListingStatus.REJECTED:
                # A rejected listing always carries a reason
                reason = updates.get('rejection_reason', self.listing.get('rejection_reason'))
                if not _clean_text(reason):
                    raise RequiredFieldError('rejection_reason', 'A reason is required to reject a listing.')
            elif status == ListingStatus.ACTIVE:
                updates['rejection_reason'] = None
        else:
            # Every owner edit goes back to moderation
            updates['status'] = ListingStatus.PENDING
            # A stale rejection reason stays unless the edit clears it
            if 'rejection_reason' in form_data and not _clean_text(form_data.get('rejection_reason')):
                updates['rejection_reason'] = None

        updated = listing_service.update_listing(self.listing_id, updates)
        if updated is not None:
            self.listing = updated
            logger.info(
                f"Listing {self.listing_id} edited by {'admin' if self.is_admin else self.user_id}"
                f" -> {updated['status']}"
            )
        return updated
