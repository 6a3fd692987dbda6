"""Request identity helpers.

Identity is asserted by the client, not verified: the current user id is
read from the ``X-User-Id`` header and handed to the view as its first
argument, so every service call receives it explicitly.
"""

from functools import wraps
import hmac

from flask import current_app, request

from classifieds.utils.errors import error_response

USER_HEADER = 'X-User-Id'
ADMIN_SECRET_HEADER = 'X-Admin-Secret'


def get_request_user_id():
    """Return the asserted user id of the current request, or None."""
    user_id = (request.headers.get(USER_HEADER) or '').strip()
    return user_id or None


def check_admin_secret(secret):
    """Compare a supplied admin secret with ADMIN_SECRET in constant time."""
    expected = current_app.config.get('ADMIN_SECRET')
    if not expected or not secret:
        return False
    return hmac.compare_digest(secret, expected)


def is_admin(user_id=None, secret=None):
    """Check if a user id is whitelisted or the admin secret matches."""
    if user_id and user_id in current_app.config.get('ADMIN_USER_IDS', []):
        return True
    return check_admin_secret(secret)


def user_required(f):
    """
    Decorator that requires an asserted user id.

    Usage:
        @bp.route('/mine')
        @user_required
        def mine(current_user_id):
            ...
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        current_user_id = get_request_user_id()
        if not current_user_id:
            return error_response('user_required', 401)
        return f(current_user_id, *args, **kwargs)
    return decorated


def admin_required(f):
    """Decorator for admin-only views; passes the (possibly None) user id."""
    @wraps(f)
    def decorated(*args, **kwargs):
        current_user_id = get_request_user_id()
        if not is_admin(current_user_id, request.headers.get(ADMIN_SECRET_HEADER)):
            return error_response('admin_required', 403)
        return f(current_user_id, *args, **kwargs)
    return decorated
