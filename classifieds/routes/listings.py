"""Listing routes: browse, view, create, edit and delete."""

from flask import Blueprint, current_app, jsonify, request

from classifieds.pages import BrowsePage, CreateListingForm, EditListingForm
from classifieds.pages.base import describe_listing
from classifieds.services import listing_service
from classifieds.utils.auth import ADMIN_SECRET_HEADER, is_admin, user_required
from classifieds.utils.errors import (
    RequiredFieldError,
    ValidationError,
    error_response,
    store_failure,
)

listings_bp = Blueprint('listings', __name__)

# EditListingForm.error_key -> HTTP status
FORM_ERROR_STATUS = {
    'listing_id_missing': 400,
    'user_required': 401,
    'no_edit_rights': 403,
    'listing_not_found': 404,
}


def form_error_response(form):
    return error_response(form.error_key, FORM_ERROR_STATUS.get(form.error_key, 400))


@listings_bp.route('', methods=['GET'])
def get_listings():
    """Browse active listings.

    Query params:
    - category: category id
    - subcategory: subcategory id
    - q: text searched in title and description
    """
    try:
        page = BrowsePage(
            category=request.args.get('category'),
            subcategory=request.args.get('subcategory'),
            search=request.args.get('q'),
        ).render()
        return jsonify({
            'listings': page['listings'],
            'total': len(page['listings']),
            'total_active': page['total_active'],
        }), 200
    except Exception as e:
        return store_failure(e, 'Browse listings failed')


@listings_bp.route('/<listing_id>', methods=['GET'])
def get_listing(listing_id):
    """Get a specific listing by ID."""
    try:
        listing = listing_service.get_listing(listing_id)
        if not listing:
            return error_response('listing_not_found', 404)
        return jsonify(describe_listing(listing)), 200
    except Exception as e:
        return store_failure(e, f'Get listing {listing_id} failed')


@listings_bp.route('', methods=['POST'])
@user_required
def create_listing(current_user_id):
    """Create a new listing; it waits in pending state for moderation."""
    try:
        listing = CreateListingForm(current_user_id).submit(request.get_json(silent=True) or {})
        return jsonify({
            'message': 'Listing created successfully',
            'listing': listing,
        }), 201
    except ValidationError as e:
        return jsonify({'error': e.errors[0], 'errors': e.errors}), 400
    except RequiredFieldError as e:
        return jsonify({'error': e.localized()}), 400
    except Exception as e:
        return store_failure(e, 'Create listing failed')


@listings_bp.route('/<listing_id>', methods=['PUT'])
@user_required
def update_listing(current_user_id, listing_id):
    """Owner edit; the listing goes back to pending."""
    try:
        form = EditListingForm(listing_id, user_id=current_user_id)
        if form.load() is None:
            return form_error_response(form)

        listing = form.submit(request.get_json(silent=True) or {})
        if listing is None:
            return error_response('listing_not_found', 404)

        return jsonify({
            'message': 'Listing updated successfully',
            'listing': listing,
        }), 200
    except ValidationError as e:
        return jsonify({'error': e.errors[0], 'errors': e.errors}), 400
    except Exception as e:
        return store_failure(e, f'Update listing {listing_id} failed')


@listings_bp.route('/<listing_id>', methods=['DELETE'])
@user_required
def delete_listing(current_user_id, listing_id):
    """Delete a listing (owner or admin). Unknown ids succeed as a no-op."""
    try:
        listing = listing_service.get_listing(listing_id)
        if listing and listing['user_id'] != current_user_id and not is_admin(
            current_user_id, request.headers.get(ADMIN_SECRET_HEADER)
        ):
            return error_response('no_edit_rights', 403)

        listing_service.delete_listing(listing_id)
        current_app.logger.info(f'Listing {listing_id} deleted by {current_user_id}')
        return jsonify({'message': 'Listing deleted successfully', 'success': True}), 200
    except Exception as e:
        return store_failure(e, f'Delete listing {listing_id} failed')
