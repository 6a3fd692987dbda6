"""Admin routes: dashboard, moderation queue and listing management."""

from flask import Blueprint, current_app, jsonify, request

from classifieds.models import ListingStatus
from classifieds.pages import AdminDashboardPage, EditListingForm
from classifieds.pages.base import describe_listing
from classifieds.services import listing_service
from classifieds.utils.auth import admin_required
from classifieds.utils.errors import (
    RequiredFieldError,
    ValidationError,
    error_response,
    store_failure,
)

admin_bp = Blueprint('admin', __name__)


# ============================================================================
# DASHBOARD
# ============================================================================

@admin_bp.route('/stats', methods=['GET'])
@admin_required
def get_stats(current_user_id):
    """Listing counts by status plus the newest pending submissions."""
    try:
        page = AdminDashboardPage(user_id=current_user_id).render()
        return jsonify({
            'stats': page['stats'],
            'recent_pending': page['recent_pending'],
        }), 200
    except Exception as e:
        return store_failure(e, 'Admin stats failed')


# ============================================================================
# MODERATION
# ============================================================================

@admin_bp.route('/pending', methods=['GET'])
@admin_required
def get_pending(current_user_id):
    """Moderation queue, newest first."""
    try:
        listings = [describe_listing(l) for l in listing_service.get_pending_listings()]
        return jsonify({'listings': listings, 'total': len(listings)}), 200
    except Exception as e:
        return store_failure(e, 'Pending listings failed')


@admin_bp.route('/listings/<listing_id>/approve', methods=['POST'])
@admin_required
def approve_listing(current_user_id, listing_id):
    """Approve a listing; clears any rejection reason."""
    try:
        listing = listing_service.approve_listing(listing_id)
        if listing is None:
            return error_response('listing_not_found', 404)
        current_app.logger.info(f'Listing {listing_id} approved by {current_user_id or "admin"}')
        return jsonify({'message': 'Listing approved', 'listing': listing}), 200
    except Exception as e:
        return store_failure(e, f'Approve listing {listing_id} failed')


@admin_bp.route('/listings/<listing_id>/reject', methods=['POST'])
@admin_required
def reject_listing(current_user_id, listing_id):
    """Reject a listing; requires a non-blank ``reason``."""
    try:
        data = request.get_json(silent=True) or {}
        listing = listing_service.reject_listing(listing_id, data.get('reason'))
        if listing is None:
            return error_response('listing_not_found', 404)
        current_app.logger.info(f'Listing {listing_id} rejected by {current_user_id or "admin"}')
        return jsonify({'message': 'Listing rejected', 'listing': listing}), 200
    except RequiredFieldError as e:
        return jsonify({'error': e.localized()}), 400
    except Exception as e:
        return store_failure(e, f'Reject listing {listing_id} failed')


# ============================================================================
# LISTING MANAGEMENT
# ============================================================================

@admin_bp.route('/listings', methods=['GET'])
@admin_required
def list_listings(current_user_id):
    """All listings newest first, optionally narrowed to one ``status``."""
    try:
        status = request.args.get('status')
        if status and status not in ListingStatus.ALL:
            return error_response('status_unknown', 400, status=status)

        listings = (
            listing_service.get_all_listings() if not status
            else listing_service.get_listings_by_status(status)
        )
        return jsonify({
            'listings': [describe_listing(l) for l in listings],
            'total': len(listings),
        }), 200
    except Exception as e:
        return store_failure(e, 'Admin listings failed')


@admin_bp.route('/listings/<listing_id>', methods=['PUT'])
@admin_required
def update_listing(current_user_id, listing_id):
    """Admin edit; keeps the submitted status instead of re-queueing."""
    try:
        form = EditListingForm(listing_id, user_id=current_user_id, is_admin=True)
        if form.load() is None:
            return error_response(form.error_key, 404 if form.error_key == 'listing_not_found' else 400)

        listing = form.submit(request.get_json(silent=True) or {})
        if listing is None:
            return error_response('listing_not_found', 404)
        return jsonify({'message': 'Listing updated successfully', 'listing': listing}), 200
    except ValidationError as e:
        return jsonify({'error': e.errors[0], 'errors': e.errors}), 400
    except RequiredFieldError as e:
        return jsonify({'error': e.localized()}), 400
    except Exception as e:
        return store_failure(e, f'Admin update listing {listing_id} failed')


@admin_bp.route('/listings/<listing_id>', methods=['DELETE'])
@admin_required
def delete_listing(current_user_id, listing_id):
    """Delete any listing."""
    try:
        listing_service.delete_listing(listing_id)
        current_app.logger.info(f'Listing {listing_id} deleted by {current_user_id or "admin"}')
        return jsonify({'message': 'Listing deleted successfully', 'success': True}), 200
    except Exception as e:
        return store_failure(e, f'Admin delete listing {listing_id} failed')
