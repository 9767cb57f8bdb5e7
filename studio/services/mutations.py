"""
Write side: like toggles, comments and post creation.

Each operation needs a viewer that names an existing user (UnauthorizedError
otherwise), commits its own transaction and then bumps the feed view version
so cached feeds are recomputed on next read. Nothing is pushed to other clients.

Store failures are reported as {success: False, error} for likes and posts;
add_comment raises MutationError instead.
"""
import logging
from typing import Optional

from opentelemetry import trace
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from studio.clients.minio_client import upload_image
from studio.clients.redis_client import invalidate_feeds
from studio.config import settings
from studio.errors import MutationError, UnauthorizedError
from studio.models import Comment, Like, Post, User
from studio.schemas import CommentResponse, LikeToggleResult, MutationResult
from studio.services.feed import comment_response
from studio.telemetry import (
    COMMENTS_CREATED_TOTAL,
    LIKE_TOGGLES_TOTAL,
    POST_CREATED_TOTAL,
)

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

LIKE_FAILED = "Failed to like post"
COMMENT_FAILED = "Failed to add comment"
POST_FAILED = "Failed to create post"
POST_INCOMPLETE = "Image and caption are required"


async def require_viewer(db: AsyncSession, viewer_id: Optional[str]) -> str:
    """Return the viewer id, or raise UnauthorizedError when it names no user."""
    if not viewer_id or await db.get(User, viewer_id) is None:
        raise UnauthorizedError()
    return viewer_id


async def _apply_toggle(db: AsyncSession, post_id: str, viewer_id: str) -> bool:
    """
    Flip the like state and return whether the post is now liked.

    A single conditional DELETE decides the direction. When it removed
    nothing, the INSERT is guarded by the (post_id, user_id) unique
    constraint: a violation means a concurrent toggle inserted the row
    first, which leaves the post liked either way.
    """
    removed = await db.execute(
        delete(Like).where(Like.post_id == post_id, Like.user_id == viewer_id)
    )
    if removed.rowcount:
        await db.commit()
        return False

    db.add(Like(post_id=post_id, user_id=viewer_id))
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.info("Concurrent like on post %s by %s; row already present", post_id, viewer_id)
    return True


async def toggle_like(
    db: AsyncSession,
    post_id: str,
    viewer_id: Optional[str],
) -> LikeToggleResult:
    viewer_id = await require_viewer(db, viewer_id)

    with tracer.start_as_current_span("toggle_like") as span:
        span.set_attribute("post.id", post_id)
        span.set_attribute("viewer.id", viewer_id)
        try:
            if await db.get(Post, post_id) is None:
                logger.warning("Like on unknown post %s by %s", post_id, viewer_id)
                return LikeToggleResult(success=False, error=LIKE_FAILED)

            liked = await _apply_toggle(db, post_id, viewer_id)
            likes = await db.scalar(
                select(func.count(Like.id)).where(Like.post_id == post_id)
            )
        except Exception:
            logger.exception("Error liking post %s", post_id)
            await db.rollback()
            return LikeToggleResult(success=False, error=LIKE_FAILED)

        LIKE_TOGGLES_TOTAL.labels(action="like" if liked else "unlike").inc()
        await invalidate_feeds()
        return LikeToggleResult(success=True, liked=liked, likes=likes or 0)


async def add_comment(
    db: AsyncSession,
    post_id: str,
    viewer_id: Optional[str],
    content: str,
) -> CommentResponse:
    viewer_id = await require_viewer(db, viewer_id)

    with tracer.start_as_current_span("add_comment") as span:
        span.set_attribute("post.id", post_id)
        if await db.get(Post, post_id) is None:
            logger.warning("Comment on unknown post %s by %s", post_id, viewer_id)
            raise MutationError(COMMENT_FAILED)

        try:
            comment = Comment(post_id=post_id, user_id=viewer_id, content=content)
            db.add(comment)
            await db.commit()
            # Load the commenter for the username
            await db.refresh(comment, attribute_names=["author"])
            result = comment_response(comment)
        except Exception as exc:
            logger.exception("Error adding comment to post %s", post_id)
            await db.rollback()
            raise MutationError(COMMENT_FAILED) from exc

        COMMENTS_CREATED_TOTAL.inc()
        await invalidate_feeds()
        return result


def _store_image(image: bytes, content_type: str) -> tuple[str, Optional[str]]:
    """Return (image, image_key) for a new post."""
    if not settings.media_storage_enabled:
        return settings.placeholder_image_url, None
    try:
        key = upload_image(image, content_type)
    except Exception as exc:
        logger.warning("Image upload failed, using placeholder: %s", exc)
        return settings.placeholder_image_url, None
    return f"/{settings.minio_bucket}/{key}", key


async def create_post(
    db: AsyncSession,
    viewer_id: Optional[str],
    caption: Optional[str],
    image: Optional[bytes],
    content_type: str = "image/jpeg",
) -> MutationResult:
    viewer_id = await require_viewer(db, viewer_id)

    if not caption or not image:
        logger.warning("Post by %s rejected: missing image or caption", viewer_id)
        return MutationResult(success=False, error=POST_INCOMPLETE)

    with tracer.start_as_current_span("create_post") as span:
        image_url, image_key = _store_image(image, content_type)
        try:
            post = Post(user_id=viewer_id, caption=caption, image=image_url, image_key=image_key)
            db.add(post)
            await db.commit()
        except Exception:
            logger.exception("Error creating post for %s", viewer_id)
            await db.rollback()
            return MutationResult(success=False, error=POST_FAILED)

        span.set_attribute("post.id", post.id)
        POST_CREATED_TOTAL.inc()
        logger.info("Post created: %s by user %s", post.id, viewer_id)
        await invalidate_feeds()
        return MutationResult(success=True, post_id=post.id)
