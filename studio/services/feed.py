"""
Read side: the viewer's feed, the explore grid and full comment threads.

Read policy: a failed query is logged, counted and served as an empty
result. Callers render "no posts" and "query failed" the same way, so these
functions never raise for store errors.
"""
import logging
from typing import Optional

from opentelemetry import trace
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from studio.clients.minio_client import resolve_image_url
from studio.config import settings
from studio.models import Comment, Follow, Like, Post
from studio.schemas import (
    CommentAuthor,
    CommentResponse,
    ExplorePost,
    FeedPost,
    UserPublic,
)
from studio.telemetry import FEED_READ_ERRORS_TOTAL

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


def comment_response(comment: Comment) -> CommentResponse:
    return CommentResponse(
        id=comment.id,
        post_id=comment.post_id,
        user_id=comment.user_id,
        content=comment.content,
        created_at=comment.created_at,
        user=CommentAuthor(username=comment.author.username),
    )


async def _like_counts(db: AsyncSession, post_ids: list[str]) -> dict[str, int]:
    rows = await db.execute(
        select(Like.post_id, func.count(Like.id))
        .where(Like.post_id.in_(post_ids))
        .group_by(Like.post_id)
    )
    return {post_id: count for post_id, count in rows.all()}


async def _comment_counts(db: AsyncSession, post_ids: list[str]) -> dict[str, int]:
    rows = await db.execute(
        select(Comment.post_id, func.count(Comment.id))
        .where(Comment.post_id.in_(post_ids))
        .group_by(Comment.post_id)
    )
    return {post_id: count for post_id, count in rows.all()}


async def _recent_comments(
    db: AsyncSession,
    post_ids: list[str],
    per_post: int,
) -> dict[str, list[CommentResponse]]:
    """Newest `per_post` comments of each post, newest first."""
    ranked = (
        select(
            Comment.id.label("comment_id"),
            func.row_number()
            .over(partition_by=Comment.post_id, order_by=Comment.created_at.desc())
            .label("rn"),
        )
        .where(Comment.post_id.in_(post_ids))
        .subquery()
    )
    rows = await db.execute(
        select(Comment)
        .join(ranked, ranked.c.comment_id == Comment.id)
        .where(ranked.c.rn <= per_post)
        .order_by(Comment.created_at.desc())
    )
    previews: dict[str, list[CommentResponse]] = {pid: [] for pid in post_ids}
    for comment in rows.scalars().all():
        previews[comment.post_id].append(comment_response(comment))
    return previews


async def _query_feed(db: AsyncSession, viewer_id: str) -> list[FeedPost]:
    followed = select(Follow.followee_id).where(Follow.follower_id == viewer_id)
    rows = await db.execute(
        select(Post)
        .where(or_(Post.user_id == viewer_id, Post.user_id.in_(followed)))
        .order_by(Post.created_at.desc())
        .limit(settings.feed_page_size)
    )
    posts = rows.scalars().unique().all()
    if not posts:
        return []

    post_ids = [p.id for p in posts]
    like_counts = await _like_counts(db, post_ids)
    liked_rows = await db.execute(
        select(Like.post_id).where(Like.user_id == viewer_id, Like.post_id.in_(post_ids))
    )
    liked = set(liked_rows.scalars().all())
    previews = await _recent_comments(db, post_ids, settings.feed_comment_preview)

    return [
        FeedPost(
            id=post.id,
            user=UserPublic.model_validate(post.author),
            image=resolve_image_url(post.image, post.image_key),
            caption=post.caption,
            likes=like_counts.get(post.id, 0),
            has_liked=post.id in liked,
            comments=previews[post.id],
            created_at=post.created_at,
        )
        for post in posts
    ]


async def get_posts(db: AsyncSession, viewer_id: Optional[str]) -> list[FeedPost]:
    """
    Feed for `viewer_id`: own posts plus posts of followed accounts, newest
    first, at most feed_page_size. No viewer → empty feed.
    """
    if not viewer_id:
        return []

    with tracer.start_as_current_span("get_posts") as span:
        span.set_attribute("viewer.id", viewer_id)
        try:
            posts = await _query_feed(db, viewer_id)
        except Exception:
            logger.exception("Error fetching feed for viewer %s", viewer_id)
            FEED_READ_ERRORS_TOTAL.labels(query="feed").inc()
            return []
        span.set_attribute("feed.posts_returned", len(posts))
        return posts


async def _query_explore(db: AsyncSession, limit: int) -> list[ExplorePost]:
    rows = await db.execute(
        select(Post).order_by(Post.created_at.desc()).limit(limit)
    )
    posts = rows.scalars().unique().all()
    if not posts:
        return []

    post_ids = [p.id for p in posts]
    like_counts = await _like_counts(db, post_ids)
    comment_counts = await _comment_counts(db, post_ids)

    return [
        ExplorePost(
            id=post.id,
            image=resolve_image_url(post.image, post.image_key),
            caption=post.caption,
            username=post.author.username,
            likes=like_counts.get(post.id, 0),
            comments=comment_counts.get(post.id, 0),
            created_at=post.created_at,
        )
        for post in posts
    ]


async def get_explore_posts(
    db: AsyncSession,
    limit: Optional[int] = None,
) -> list[ExplorePost]:
    """Newest posts from everyone with like and comment counts."""
    limit = limit or settings.explore_page_size
    with tracer.start_as_current_span("get_explore_posts"):
        try:
            return await _query_explore(db, limit)
        except Exception:
            logger.exception("Error fetching explore posts")
            FEED_READ_ERRORS_TOTAL.labels(query="explore").inc()
            return []


async def get_comments(db: AsyncSession, post_id: str) -> list[CommentResponse]:
    """Every comment on a post, oldest first."""
    try:
        rows = await db.execute(
            select(Comment)
            .where(Comment.post_id == post_id)
            .order_by(Comment.created_at.asc())
        )
        return [comment_response(c) for c in rows.scalars().all()]
    except Exception:
        logger.exception("Error fetching comments for post %s", post_id)
        FEED_READ_ERRORS_TOTAL.labels(query="comments").inc()
        return []
