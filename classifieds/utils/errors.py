"""Error types raised by services and forms, and their JSON rendering."""

from flask import current_app, jsonify

from classifieds import db
from classifieds.constants.messages import translate


class RequiredFieldError(ValueError):
    """A required field was missing or blank."""

    def __init__(self, field, message=None):
        self.field = field
        super().__init__(message or f'{field} is required')

    def localized(self, locale=None):
        if self.field == 'rejection_reason':
            return translate('reject_reason_required', locale)
        if self.field == 'user_id':
            return translate('user_required', locale)
        return translate('field_required', locale, field=self.field)


class ValidationError(ValueError):
    """Form checks failed; carries one localized message per problem."""

    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__('; '.join(self.errors))


def error_response(key, status, /, **params):
    """Build a ``({'error': <localized text>}, status)`` response."""
    return jsonify({'error': translate(key, **params)}), status


def store_failure(exc, context):
    """Roll back, log and answer with the generic failure text."""
    db.session.rollback()
    current_app.logger.exception(f"{context}: {exc}")
    return error_response('generic_failure', 500)
