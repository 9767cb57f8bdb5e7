"""
Feed endpoints:
  GET /feed          — the viewer's feed (own + followed posts)
  GET /feed/explore  — newest posts from everyone

The viewer's feed goes through the Redis view cache. Entries are keyed by
the view version read before the feed is computed; every mutation bumps it,
so a feed computed before a committed write is never served after it.
"""
import logging
import time
from typing import Optional

from fastapi import APIRouter, Depends, Query
from opentelemetry import trace
from sqlalchemy.ext.asyncio import AsyncSession

from studio.clients.redis_client import cache_feed, current_version, get_cached_feed
from studio.database import get_db
from studio.schemas import ExplorePost, FeedResponse
from studio.services.feed import get_explore_posts, get_posts
from studio.session import get_viewer_id
from studio.telemetry import FEED_LATENCY

logger = logging.getLogger(__name__)
router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.get("/", response_model=FeedResponse)
async def get_feed(
    viewer_id: Optional[str] = Depends(get_viewer_id),
    db: AsyncSession = Depends(get_db),
):
    start_time = time.time()

    with tracer.start_as_current_span("get_feed") as span:
        # Pinned before the read so a concurrent mutation's bump orphans our entry
        version = await current_version() if viewer_id else None
        if version is not None:
            cached = await get_cached_feed(viewer_id, version)
            if cached:
                span.set_attribute("feed.cache_hit", True)
                feed = FeedResponse.model_validate_json(cached)
                feed.cached = True
                FEED_LATENCY.observe(time.time() - start_time)
                return feed

        posts = await get_posts(db, viewer_id)
        feed = FeedResponse(viewer_id=viewer_id, posts=posts)

        # Empty feeds are not cached: they may stand for a failed read
        if version is not None and posts:
            await cache_feed(viewer_id, version, feed.model_dump_json())

        span.set_attribute("feed.cache_hit", False)
        FEED_LATENCY.observe(time.time() - start_time)
        return feed


@router.get("/explore", response_model=list[ExplorePost])
async def explore(
    limit: Optional[int] = Query(None, ge=1, le=60),
    db: AsyncSession = Depends(get_db),
):
    return await get_explore_posts(db, limit)
