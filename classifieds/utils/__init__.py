"""Shared utilities for the classifieds backend."""

from classifieds.utils.auth import (
    user_required,
    admin_required,
    get_request_user_id,
    is_admin,
)
from classifieds.utils.errors import RequiredFieldError, ValidationError
from classifieds.utils.timestamps import server_timestamp, to_millis, now_millis

__all__ = [
    'user_required',
    'admin_required',
    'get_request_user_id',
    'is_admin',
    'RequiredFieldError',
    'ValidationError',
    'server_timestamp',
    'to_millis',
    'now_millis',
]
