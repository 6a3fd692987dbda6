"""Category catalogue routes."""

from flask import Blueprint, jsonify

from classifieds.constants import CATEGORIES

categories_bp = Blueprint('categories', __name__)


@categories_bp.route('', methods=['GET'])
def get_categories():
    """Get the category tree."""
    return jsonify({'categories': CATEGORIES}), 200
