"""Redis cache for rendered storefront pages.

Caching is best-effort: without Redis every call is a no-op, and Redis
errors are logged but never fail the caller.
"""
import json
import logging
from flask import current_app
from redis.exceptions import RedisError
from bakery import extensions

logger = logging.getLogger(__name__)

PRODUCT_PAGE_KEY = "page:product:{product_id}"


def product_page_key(product_id):
    return PRODUCT_PAGE_KEY.format(product_id=product_id)


def get_json(key):
    client = extensions.redis_client
    if client is None:
        return None
    try:
        raw = client.get(key)
    except RedisError:
        logger.warning("Cache read failed for %s", key, exc_info=True)
        return None
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Discarding unreadable cache entry %s", key)
        return None


def set_json(key, payload, ttl=None):
    client = extensions.redis_client
    if client is None:
        return
    ttl = ttl or current_app.config.get("PAGE_CACHE_TTL", 300)
    try:
        client.setex(key, ttl, json.dumps(payload, default=str).encode("utf-8"))
    except RedisError:
        logger.warning("Cache write failed for %s", key, exc_info=True)


def invalidate_product(product_id):
    """Drop the cached configuration page of one product."""
    invalidate_products([product_id])


def invalidate_products(product_ids):
    client = extensions.redis_client
    keys = [product_page_key(pid) for pid in product_ids]
    if client is None or not keys:
        return
    try:
        client.delete(*keys)
    except RedisError:
        logger.warning("Cache invalidation failed for %s", keys, exc_info=True)
