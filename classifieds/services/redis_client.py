"""Redis client for fanning change notifications out across workers."""

import json
import logging
import time

import redis

logger = logging.getLogger(__name__)

CHANGES_CHANNEL = 'classifieds:changes'
RECONNECT_DELAY = 5  # seconds

# Redis connection (lazy initialization)
_redis_client = None
_redis_url = None


def get_redis(redis_url):
    """Get or create the Redis connection for a URL."""
    global _redis_client, _redis_url

    if not redis_url:
        logger.warning("REDIS_URL not set - change feed is limited to this worker")
        return None

    if _redis_client is not None and _redis_url == redis_url:
        return _redis_client

    try:
        client = redis.from_url(redis_url, decode_responses=True)
        client.ping()
    except redis.RedisError as e:
        logger.error(f"Redis connection failed: {e}")
        return None

    _redis_client = client
    _redis_url = redis_url
    logger.info("Redis connected successfully")
    return _redis_client


def publish_changes(collections, origin, redis_url):
    """Tell other workers which collections changed.

    Returns:
        bool: True when the notification was published.
    """
    r = get_redis(redis_url)
    if not r:
        return False

    try:
        payload = json.dumps({'origin': origin, 'collections': sorted(collections)})
        r.publish(CHANGES_CHANNEL, payload)
        return True
    except redis.RedisError as e:
        logger.error(f"Redis publish_changes error: {e}")
        return False


def decode_change(raw, own_origin):
    """Parse a pub/sub payload; None for our own or malformed notifications."""
    try:
        payload = json.loads(raw)
        origin = payload['origin']
        collections = set(payload['collections'])
    except (TypeError, ValueError, KeyError) as e:
        logger.warning(f"Ignoring malformed change notification: {e}")
        return None
    if origin == own_origin:
        return None
    return collections


def listen_for_changes(app, feed):
    """Background loop: re-deliver changes published by other workers."""
    redis_url = app.config.get('REDIS_URL')
    while True:
        r = get_redis(redis_url)
        if not r:
            time.sleep(RECONNECT_DELAY)
            continue
        try:
            pubsub = r.pubsub(ignore_subscribe_messages=True)
            pubsub.subscribe(CHANGES_CHANNEL)
            for message in pubsub.listen():
                collections = decode_change(message.get('data'), feed.origin)
                if not collections:
                    continue
                with app.app_context():
                    feed.deliver(collections)
        except redis.RedisError as e:
            logger.error(f"Redis change listener error: {e}")
            time.sleep(RECONNECT_DELAY)
