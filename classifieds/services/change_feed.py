"""Change feed: live queries that re-deliver their full result set.

A subscription holds a Query and a snapshot callback. The current
result set is delivered on subscribe and again whenever a commit touches
the query's collection. Snapshots are always complete; subscribers
replace their state with them and never merge.
"""

import itertools
import logging
import threading
import uuid

from classifieds.services import document_store

logger = logging.getLogger(__name__)


class Subscription:
    """Detach handle for one live query. Calling it cancels it."""

    def __init__(self, feed, sub_id, query, on_snapshot, on_error=None):
        self._feed = feed
        self.id = sub_id
        self.query = query
        self.on_snapshot = on_snapshot
        self.on_error = on_error
        self.active = True

    def refresh(self):
        """Run the query and hand the full result set to the subscriber."""
        if not self.active:
            return
        try:
            documents = document_store.fetch(self.query)
        except Exception as e:
            logger.error(f'Live query {self.query!r} failed: {e}')
            if self.on_error:
                try:
                    self.on_error(e)
                except Exception:
                    logger.exception(f'Error callback of subscription {self.id} failed')
            return

        try:
            self.on_snapshot(documents)
        except Exception:
            logger.exception(f'Snapshot callback of subscription {self.id} failed')

    def cancel(self):
        if self.active:
            self.active = False
            self._feed._remove(self.id)

    __call__ = cancel

    def __repr__(self):
        return f'<Subscription {self.id} {self.query!r} active={self.active}>'


class ChangeFeed:
    """Registry of live queries plus the publish/deliver loop."""

    def __init__(self):
        self.app = None
        self.origin = uuid.uuid4().hex
        self._subscriptions = {}
        self._lock = threading.RLock()
        self._ids = itertools.count(1)
        self._local = threading.local()

    def init_app(self, app):
        self.app = app
        if app.config.get('REDIS_URL') and not app.config.get('TESTING'):
            from classifieds import socketio
            from classifieds.services.redis_client import listen_for_changes
            socketio.start_background_task(listen_for_changes, app, self)

    def subscribe(self, query, on_snapshot, on_error=None):
        """Open a live query; the first snapshot is delivered before returning."""
        with self._lock:
            sub = Subscription(self, next(self._ids), query, on_snapshot, on_error)
            self._subscriptions[sub.id] = sub
        logger.debug(f'Subscribed {sub!r}')
        if self._delivering():
            sub.refresh()
        else:
            self._run(set(), first=sub)
        return sub

    def _remove(self, sub_id):
        with self._lock:
            self._subscriptions.pop(sub_id, None)
        logger.debug(f'Unsubscribed {sub_id}')

    def active_count(self, collection=None):
        with self._lock:
            return sum(
                1 for sub in self._subscriptions.values()
                if collection is None or sub.query.collection == collection
            )

    def clear(self):
        """Drop every subscription (used between tests and on shutdown)."""
        with self._lock:
            for sub in self._subscriptions.values():
                sub.active = False
            self._subscriptions.clear()

    def publish(self, *collections):
        """Announce committed changes locally and to other workers."""
        collections = {name for name in collections if name}
        if not collections:
            return
        redis_url = self.app.config.get('REDIS_URL') if self.app is not None else None
        if redis_url:
            from classifieds.services.redis_client import publish_changes
            publish_changes(collections, self.origin, redis_url)
        self.deliver(collections)

    def deliver(self, collections):
        """Re-run every live query on the given collections.

        A publish issued from inside a snapshot callback is queued and
        handled by the loop already running on this thread.
        """
        if self._delivering():
            self._local.pending.update(collections)
            return
        self._run(set(collections))

    def _delivering(self):
        return getattr(self._local, 'pending', None) is not None

    def _run(self, collections, first=None):
        self._local.pending = collections
        try:
            if first is not None:
                first.refresh()
            while self._local.pending:
                current = self._local.pending
                self._local.pending = set()
                with self._lock:
                    targets = [
                        sub for sub in self._subscriptions.values()
                        if sub.query.collection in current
                    ]
                for sub in targets:
                    sub.refresh()
        finally:
            self._local.pending = None


feed = ChangeFeed()
