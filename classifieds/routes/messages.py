"""Message routes: listing chats between buyers and sellers."""

from flask import Blueprint, current_app, jsonify, request

from classifieds.pages import MessagesPage
from classifieds.services import chat_service, listing_service
from classifieds.utils.auth import user_required
from classifieds.utils.errors import RequiredFieldError, error_response, store_failure

messages_bp = Blueprint('messages', __name__)

MAX_MESSAGE_LENGTH = 5000


@messages_bp.route('/messages/chats', methods=['GET'])
@user_required
def get_chats(current_user_id):
    """Chat previews for the current user, unread first."""
    try:
        page = MessagesPage(user_id=current_user_id).render()
        if page['error']:
            return jsonify({'error': page['error']}), 500
        return jsonify({
            'chats': page['chats'],
            'total': len(page['chats']),
            'total_unread': page['total_unread'],
        }), 200
    except Exception as e:
        return store_failure(e, f'Chats of {current_user_id} failed')


@messages_bp.route('/messages/unread-count', methods=['GET'])
@user_required
def get_unread_count(current_user_id):
    """Unread messages addressed to the current user, optionally for one listing."""
    try:
        count = chat_service.count_unread_for_user(current_user_id, request.args.get('listing_id'))
        return jsonify({'unread_count': count}), 200
    except Exception as e:
        return store_failure(e, f'Unread count of {current_user_id} failed')


@messages_bp.route('/listings/<listing_id>/messages', methods=['GET'])
@user_required
def get_messages(current_user_id, listing_id):
    """Messages about a listing that the current user sent or received."""
    try:
        messages = chat_service.get_messages_for_listing(listing_id, current_user_id)
        return jsonify({'messages': messages, 'total': len(messages)}), 200
    except Exception as e:
        return store_failure(e, f'Messages of listing {listing_id} failed')


@messages_bp.route('/listings/<listing_id>/messages', methods=['POST'])
@user_required
def send_message(current_user_id, listing_id):
    """Send a message about a listing.

    A buyer writes to the seller; the seller answers by naming the
    buyer in ``receiver_id``.
    """
    try:
        data = request.get_json(silent=True) or {}
        text = (data.get('text') or '').strip()

        if not text:
            return error_response('field_required', 400, field='text')
        if len(text) > MAX_MESSAGE_LENGTH:
            return error_response('message_too_long', 400, max_length=MAX_MESSAGE_LENGTH)

        listing = listing_service.get_listing(listing_id)
        if not listing:
            return error_response('listing_not_found', 404)

        receiver_id = data.get('receiver_id')
        if listing['user_id'] != current_user_id:
            receiver_id = listing['user_id']

        message = chat_service.send_message(listing_id, current_user_id, receiver_id, text)
        return jsonify({'message': message}), 201
    except RequiredFieldError as e:
        return jsonify({'error': e.localized()}), 400
    except Exception as e:
        return store_failure(e, f'Send message on listing {listing_id} failed')


@messages_bp.route('/listings/<listing_id>/messages/read', methods=['PUT'])
@user_required
def mark_read(current_user_id, listing_id):
    """Mark every message addressed to the current user on a listing as read."""
    try:
        updated_count = chat_service.mark_messages_read(listing_id, current_user_id)
        current_app.logger.debug(f'{updated_count} message(s) marked read on {listing_id}')
        return jsonify({
            'success': True,
            'messages_marked_read': updated_count,
        }), 200
    except Exception as e:
        return store_failure(e, f'Mark read on listing {listing_id} failed')
