"""Shared constants for the application."""

from classifieds.constants.categories import (
    CATEGORIES,
    get_category,
    get_category_name,
    get_subcategory_name,
    validate_category,
)
from classifieds.constants.messages import MESSAGES, translate

__all__ = [
    'CATEGORIES',
    'get_category',
    'get_category_name',
    'get_subcategory_name',
    'validate_category',
    'MESSAGES',
    'translate',
]
