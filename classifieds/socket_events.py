"""WebSocket events for live pages and raw live queries."""

import logging
import threading

from flask import request
from flask_socketio import emit

from classifieds.constants.messages import translate
from classifieds.pages import PAGES, UnknownAction
from classifieds.services.change_feed import feed
from classifieds.services.document_store import InvalidQuery, Query
from classifieds.utils.auth import is_admin

logger = logging.getLogger(__name__)

# sid -> {page_id: Page}
open_pages = {}
# sid -> {subscription_id: Subscription}
live_queries = {}
_registry_lock = threading.Lock()


def build_query(data):
    """Build a Query from a ``subscribe`` payload.

    ``where`` is a mapping of field to value, combined with AND.
    """
    query = Query(data.get('collection'))
    where = data.get('where') or {}
    if not isinstance(where, dict):
        raise InvalidQuery('where must be an object')
    for field, value in where.items():
        query = query.where(field, value)
    if data.get('order_by'):
        query = query.order_by(data['order_by'], data.get('direction') or 'asc')
    if data.get('limit') is not None:
        query = query.limit(data['limit'])
    return query


def _page(sid, page_id):
    with _registry_lock:
        return open_pages.get(sid, {}).get(page_id)


def close_client(sid):
    """Unmount every page and cancel every raw live query of one client."""
    with _registry_lock:
        pages = open_pages.pop(sid, {})
        subscriptions = live_queries.pop(sid, {})
    for page in pages.values():
        page.unmount()
    for subscription in subscriptions.values():
        subscription.cancel()
    return len(pages), len(subscriptions)


def register_socket_events(socketio):
    """Register all Socket.IO event handlers."""

    def send_error(key, sid=None, locale=None, **extra):
        payload = {'message': translate(key, locale)}
        payload.update(extra)
        if sid is None:
            emit('error', payload)
        else:
            socketio.emit('error', payload, to=sid)

    @socketio.on('connect')
    def handle_connect(auth=None):
        logger.info(f'Client connected: {request.sid}')

    @socketio.on('disconnect')
    def handle_disconnect(*args):
        try:
            pages, subscriptions = close_client(request.sid)
            logger.info(
                f'Client disconnected: {request.sid} '
                f'({pages} pages, {subscriptions} live queries closed)'
            )
        except Exception as e:
            logger.error(f'Disconnect error: {e}')

    @socketio.on('open_page')
    def handle_open_page(data):
        """Mount a page for this client.

        Payload: page, page_id, user_id, params, admin_secret, locale.
        Every state change is pushed as ``page_state``.
        """
        data = data or {}
        sid = request.sid
        locale = data.get('locale')
        page_cls = PAGES.get(data.get('page'))
        page_id = data.get('page_id') or data.get('page')
        if page_cls is None:
            send_error('unknown_page', locale=locale, page=data.get('page'))
            return {'ok': False}

        user_id = data.get('user_id')
        if page_cls.admin_only and not is_admin(user_id, data.get('admin_secret')):
            send_error('admin_required', locale=locale, page_id=page_id)
            return {'ok': False}

        def push_state(state):
            socketio.emit('page_state', {'page_id': page_id, 'state': state}, to=sid)

        params = data.get('params') or {}
        if not isinstance(params, dict):
            send_error('invalid_params', locale=locale, page_id=page_id)
            return {'ok': False}
        unknown = sorted(set(params) - set(page_cls.PARAMS))
        if unknown:
            logger.warning(f'Bad params for page {page_cls.name}: {unknown}')
            send_error('invalid_params', locale=locale, page_id=page_id, params=unknown)
            return {'ok': False}

        page = page_cls(user_id=user_id, on_change=push_state, locale=locale, **params)

        previous = _page(sid, page_id)
        if previous is not None:
            previous.unmount()
        with _registry_lock:
            open_pages.setdefault(sid, {})[page_id] = page

        page.mount()
        push_state(page.to_dict())
        logger.info(f'Page {page_cls.name} opened as {page_id} for {sid}')
        return {'ok': True, 'page_id': page_id}

    @socketio.on('close_page')
    def handle_close_page(data):
        page_id = (data or {}).get('page_id')
        with _registry_lock:
            page = open_pages.get(request.sid, {}).pop(page_id, None)
        if page is not None:
            page.unmount()
        return {'ok': page is not None}

    @socketio.on('set_user')
    def handle_set_user(data):
        """Switch the user of one page, or of every page when no page_id is given."""
        data = data or {}
        with _registry_lock:
            pages = dict(open_pages.get(request.sid, {}))
        if data.get('page_id'):
            pages = {data['page_id']: pages[data['page_id']]} if data['page_id'] in pages else {}
        for page_id, page in pages.items():
            if page.admin_only and not is_admin(data.get('user_id'), data.get('admin_secret')):
                send_error('admin_required', locale=page.locale, page_id=page_id)
                continue
            page.set_user(data.get('user_id'))
        return {'ok': True, 'pages': len(pages)}

    @socketio.on('page_action')
    def handle_page_action(data):
        """Run an action of an open page: page_id, action, args, kwargs."""
        data = data or {}
        page_id = data.get('page_id')
        page = _page(request.sid, page_id)
        if page is None:
            send_error('unknown_page', page_id=page_id)
            return {'ok': False}

        action = data.get('action')
        try:
            result = page.perform(action, *(data.get('args') or []), **(data.get('kwargs') or {}))
        except UnknownAction:
            send_error('unknown_action', locale=page.locale, page_id=page_id, action=action)
            return {'ok': False}
        except TypeError as e:
            logger.warning(f'Bad arguments for {page.name}.{action}: {e}')
            send_error('generic_failure', locale=page.locale, page_id=page_id, action=action)
            return {'ok': False}
        return {'ok': True, 'result': result}

    @socketio.on('subscribe')
    def handle_subscribe(data):
        """Open a raw live query; every result set is pushed as ``snapshot``."""
        data = data or {}
        sid = request.sid
        subscription_id = data.get('subscription_id')
        try:
            query = build_query(data)
        except InvalidQuery as e:
            logger.warning(f'Rejected live query from {sid}: {e}')
            send_error('invalid_query', locale=data.get('locale'), subscription_id=subscription_id)
            return {'ok': False}

        def push_snapshot(documents):
            socketio.emit('snapshot', {
                'subscription_id': subscription_id,
                'collection': query.collection,
                'documents': documents,
            }, to=sid)

        def push_error(exc):
            send_error('generic_failure', sid=sid, locale=data.get('locale'),
                       subscription_id=subscription_id)

        with _registry_lock:
            previous = live_queries.get(sid, {}).pop(subscription_id, None)
        if previous is not None:
            previous.cancel()

        subscription = feed.subscribe(query, push_snapshot, push_error)
        with _registry_lock:
            live_queries.setdefault(sid, {})[subscription_id] = subscription
        return {'ok': True, 'subscription_id': subscription_id}

    @socketio.on('unsubscribe')
    def handle_unsubscribe(data):
        subscription_id = (data or {}).get('subscription_id')
        with _registry_lock:
            subscription = live_queries.get(request.sid, {}).pop(subscription_id, None)
        if subscription is not None:
            subscription.cancel()
        return {'ok': subscription is not None}
