"""
Redis client wrapper — feed view cache.

Keys:
  views:version             — STRING counter, bumped by every mutation
  feed:{viewer_id}:{version} — STRING (JSON) rendered feed, TTL feed_cache_ttl

A cached feed is only read back under the version it was written with, so
incrementing views:version invalidates every cached feed at once; stale
entries simply expire.

Redis is optional: when it is disabled or unreachable every call degrades
to a cache miss / no-op and the feed is recomputed from the store.
"""
import logging
from typing import Optional

import redis.asyncio as aioredis

from studio.config import settings

logger = logging.getLogger(__name__)

VERSION_KEY = "views:version"

_redis: Optional[aioredis.Redis] = None


async def init_redis() -> None:
    global _redis
    _redis = aioredis.Redis(
        host=settings.redis_host,
        port=settings.redis_port,
        decode_responses=True,
    )
    await _redis.ping()
    logger.info("Redis connected at %s:%s", settings.redis_host, settings.redis_port)


async def close_redis() -> None:
    global _redis
    if _redis is not None:
        await _redis.aclose()
        _redis = None


def get_redis() -> Optional[aioredis.Redis]:
    return _redis


def _feed_key(viewer_id: str, version: str) -> str:
    return f"feed:{viewer_id}:{version}"


async def current_version() -> Optional[str]:
    """
    The view version to read and write a feed under, or None when the cache
    is unavailable. Read it once, before the feed is computed: a feed cached
    under a version that a later mutation bumped is never read back.
    """
    r = get_redis()
    if r is None:
        return None
    try:
        return await r.get(VERSION_KEY) or "0"
    except aioredis.RedisError as exc:
        logger.warning("Feed view version read failed: %s", exc)
        return None


async def get_cached_feed(viewer_id: str, version: str) -> Optional[str]:
    r = get_redis()
    if r is None:
        return None
    try:
        return await r.get(_feed_key(viewer_id, version))
    except aioredis.RedisError as exc:
        logger.warning("Feed cache read failed (viewer=%s): %s", viewer_id, exc)
        return None


async def cache_feed(viewer_id: str, version: str, payload: str) -> None:
    r = get_redis()
    if r is None:
        return
    try:
        await r.set(_feed_key(viewer_id, version), payload, ex=settings.feed_cache_ttl)
    except aioredis.RedisError as exc:
        logger.warning("Feed cache write failed (viewer=%s): %s", viewer_id, exc)


async def invalidate_feeds() -> None:
    """Signal that every cached feed must be recomputed on next read."""
    r = get_redis()
    if r is None:
        return
    try:
        version = await r.incr(VERSION_KEY)
        logger.debug("Feed views invalidated (version=%s)", version)
    except aioredis.RedisError as exc:
        logger.warning("Feed cache invalidation failed: %s", exc)
