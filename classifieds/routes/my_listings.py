"""The current user's own listings, grouped by moderation status."""

from flask import Blueprint, jsonify, request

from classifieds.pages import MyListingsPage
from classifieds.utils.auth import user_required
from classifieds.utils.errors import store_failure

my_bp = Blueprint('my_listings', __name__)


@my_bp.route('/listings', methods=['GET'])
@user_required
def get_my_listings(current_user_id):
    """Listings of the current user for one tab plus per-tab counts.

    Query params:
    - tab: active (default), pending or rejected
    """
    try:
        page = MyListingsPage(
            tab=request.args.get('tab', 'active'),
            user_id=current_user_id,
        ).render()
        if page['error']:
            return jsonify({'error': page['error']}), 500
        return jsonify({
            'tab': page['tab'],
            'listings': page['listings'],
            'counts': page['counts'],
        }), 200
    except Exception as e:
        return store_failure(e, f'My listings of {current_user_id} failed')
