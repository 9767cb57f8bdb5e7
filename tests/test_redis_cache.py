"""Tests for the versioned feed view cache."""

import base64

import pytest
import redis.asyncio as aioredis

from studio.clients import redis_client
from studio.clients.redis_client import (
    VERSION_KEY,
    cache_feed,
    current_version,
    get_cached_feed,
    invalidate_feeds,
)
from studio.routers import feed as feed_router


class FakeRedis:
    """Just enough of redis.asyncio.Redis (decode_responses=True) for the cache."""

    def __init__(self):
        self.store: dict[str, str] = {}
        self.expiry: dict[str, int] = {}

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        self.store[key] = value
        if ex is not None:
            self.expiry[key] = ex
        return True

    async def incr(self, key):
        value = int(self.store.get(key, "0")) + 1
        self.store[key] = str(value)
        return value

    async def aclose(self):
        pass


class BrokenRedis(FakeRedis):
    async def get(self, key):
        raise aioredis.ConnectionError("connection reset")

    async def set(self, key, value, ex=None):
        raise aioredis.ConnectionError("connection reset")

    async def incr(self, key):
        raise aioredis.TimeoutError("timed out")


@pytest.fixture
def fake_redis(monkeypatch) -> FakeRedis:
    fake = FakeRedis()
    monkeypatch.setattr(redis_client, "_redis", fake)
    return fake


# =============================================================================
# Client functions
# =============================================================================

@pytest.mark.asyncio
async def test_disabled_cache_is_a_no_op(monkeypatch):
    monkeypatch.setattr(redis_client, "_redis", None)

    assert await current_version() is None
    await cache_feed("viewer", "0", '{"posts": []}')
    assert await get_cached_feed("viewer", "0") is None
    await invalidate_feeds()


@pytest.mark.asyncio
async def test_cached_feed_is_read_back(fake_redis):
    version = await current_version()
    assert version == "0"

    await cache_feed("viewer", version, "payload")
    assert await get_cached_feed("viewer", version) == "payload"
    assert await get_cached_feed("someone-else", version) is None
    assert fake_redis.expiry["feed:viewer:0"] == redis_client.settings.feed_cache_ttl


@pytest.mark.asyncio
async def test_invalidation_hides_every_cached_feed(fake_redis):
    version = await current_version()
    await cache_feed("alice", version, "alice-feed")
    await cache_feed("bob", version, "bob-feed")

    await invalidate_feeds()

    assert fake_redis.store[VERSION_KEY] == "1"
    version = await current_version()
    assert await get_cached_feed("alice", version) is None
    assert await get_cached_feed("bob", version) is None

    await cache_feed("alice", version, "fresh")
    assert await get_cached_feed("alice", version) == "fresh"
    assert "feed:alice:1" in fake_redis.store


@pytest.mark.asyncio
async def test_feed_computed_before_a_mutation_is_not_served_after_it(fake_redis):
    # Read starts: version pinned, feed computed without the like
    version = await current_version()
    stale = "liked=False"

    # A like commits while the read is in flight
    await invalidate_feeds()

    await cache_feed("viewer", version, stale)
    assert await get_cached_feed("viewer", await current_version()) is None


@pytest.mark.asyncio
async def test_redis_errors_degrade_to_cache_miss(monkeypatch):
    monkeypatch.setattr(redis_client, "_redis", BrokenRedis())

    assert await current_version() is None
    assert await get_cached_feed("viewer", "0") is None
    await cache_feed("viewer", "0", "payload")
    await invalidate_feeds()


@pytest.mark.asyncio
async def test_close_redis_resets_client(monkeypatch):
    monkeypatch.setattr(redis_client, "_redis", FakeRedis())
    await redis_client.close_redis()
    assert redis_client.get_redis() is None


# =============================================================================
# GET /feed through the cache
# =============================================================================

async def _user_with_post(client) -> str:
    user = (await client.post("/users/", json={"username": "alice", "name": "Alice"})).json()
    resp = await client.post(
        "/posts/",
        json={"caption": "Sunset", "image_base64": base64.b64encode(b"img").decode()},
        headers={"X-User-Id": user["id"]},
    )
    assert resp.json()["success"] is True
    return user["id"]


@pytest.mark.asyncio
async def test_feed_endpoint_serves_cached_feed(api_client, fake_redis):
    viewer = await _user_with_post(api_client)

    first = (await api_client.get("/feed/", headers={"X-User-Id": viewer})).json()
    second = (await api_client.get("/feed/", headers={"X-User-Id": viewer})).json()

    assert first["cached"] is False
    assert second["cached"] is True
    assert second["posts"] == first["posts"]


@pytest.mark.asyncio
async def test_feed_endpoint_drops_feed_raced_by_a_mutation(api_client, fake_redis, monkeypatch):
    viewer = await _user_with_post(api_client)
    real_get_posts = feed_router.get_posts

    async def get_posts_then_mutation_commits(db, viewer_id):
        posts = await real_get_posts(db, viewer_id)
        await invalidate_feeds()
        return posts

    monkeypatch.setattr(feed_router, "get_posts", get_posts_then_mutation_commits)
    raced = (await api_client.get("/feed/", headers={"X-User-Id": viewer})).json()
    assert raced["cached"] is False

    monkeypatch.setattr(feed_router, "get_posts", real_get_posts)
    after = (await api_client.get("/feed/", headers={"X-User-Id": viewer})).json()
    assert after["cached"] is False
