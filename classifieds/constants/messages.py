"""User-facing text, keyed by message id and locale."""

from flask import current_app, has_app_context

MESSAGES = {
    'ru': {
        'generic_failure': 'Что-то пошло не так. Пожалуйста, попробуйте еще раз.',
        'listing_not_found': 'Объявление не найдено.',
        'listing_id_missing': 'ID объявления не указан.',
        'listing_load_failed': 'Не удалось загрузить информацию о товаре.',
        'listings_load_failed': 'Не удалось загрузить ваши объявления.',
        'listing_create_failed': 'Не удалось создать объявление. Пожалуйста, попробуйте еще раз.',
        'listing_update_failed': 'Не удалось обновить объявление. Пожалуйста, попробуйте еще раз.',
        'listing_delete_failed': 'Ошибка при удалении объявления.',
        'no_edit_rights': 'У вас нет прав для редактирования этого объявления.',
        'user_unknown': 'Пользователь не определен. Невозможно загрузить объявления.',
        'user_required': 'Не удалось определить пользователя. Пожалуйста, убедитесь, что вы вошли в систему.',
        'admin_required': 'Требуются права администратора.',
        'chats_load_failed': 'Не удалось загрузить ваши чаты.',
        'message_send_failed': 'Не удалось отправить сообщение.',
        'no_messages': 'Нет сообщений',
        'reject_reason_required': 'Укажите причину отклонения.',
        'moderation_failed': 'Не удалось изменить статус объявления.',
        'field_required': 'Поле «{field}» обязательно.',
        'title_required': 'Введите название.',
        'description_required': 'Введите описание.',
        'price_invalid': 'Цена должна быть неотрицательным числом.',
        'category_invalid': 'Выберите категорию из списка.',
        'unknown_page': 'Неизвестная страница.',
        'unknown_action': 'Неизвестное действие.',
        'invalid_query': 'Некорректный запрос подписки.',
        'invalid_params': 'Недопустимые параметры страницы.',
        'message_too_long': 'Сообщение слишком длинное (максимум {max_length} символов).',
        'status_unknown': 'Неизвестный статус: {status}.',
    },
    'en': {
        'generic_failure': 'Something went wrong. Please try again.',
        'listing_not_found': 'Listing not found.',
        'listing_id_missing': 'Listing id is missing.',
        'listing_load_failed': 'Could not load the listing.',
        'listings_load_failed': 'Could not load your listings.',
        'listing_create_failed': 'Could not create the listing. Please try again.',
        'listing_update_failed': 'Could not update the listing. Please try again.',
        'listing_delete_failed': 'Could not delete the listing.',
        'no_edit_rights': 'You are not allowed to edit this listing.',
        'user_unknown': 'User is unknown. Cannot load listings.',
        'user_required': 'Could not determine the user. Please make sure you are signed in.',
        'admin_required': 'Admin access required.',
        'chats_load_failed': 'Could not load your chats.',
        'message_send_failed': 'Could not send the message.',
        'no_messages': 'No messages',
        'reject_reason_required': 'Please give a rejection reason.',
        'moderation_failed': 'Could not change the listing status.',
        'field_required': 'Field "{field}" is required.',
        'title_required': 'Please enter a title.',
        'description_required': 'Please enter a description.',
        'price_invalid': 'Price must be a non-negative number.',
        'category_invalid': 'Please pick a category from the list.',
        'unknown_page': 'Unknown page.',
        'unknown_action': 'Unknown action.',
        'invalid_query': 'Invalid subscription query.',
        'invalid_params': 'Invalid page parameters.',
        'message_too_long': 'Message too long (max {max_length} characters).',
        'status_unknown': 'Unknown status: {status}.',
    },
}

FALLBACK_LOCALE = 'ru'


def translate(key, locale=None, **params):
    """Look up user-facing text, falling back to the default locale and then the key."""
    if locale is None and has_app_context():
        locale = current_app.config.get('DEFAULT_LOCALE')
    catalogue = MESSAGES.get(locale) or MESSAGES[FALLBACK_LOCALE]
    text = catalogue.get(key) or MESSAGES[FALLBACK_LOCALE].get(key, key)
    return text.format(**params) if params else text
