"""
Post endpoints (viewer from the X-User-Id header):
  POST /posts                 — create a post
  POST /posts/{id}/like       — toggle the viewer's like
  POST /posts/{id}/comments   — comment on a post
  GET  /posts/{id}/comments   — full comment thread, oldest first
"""
import base64
import binascii
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from studio.database import get_db
from studio.schemas import (
    CommentCreate,
    CommentResponse,
    LikeToggleResult,
    MutationResult,
    PostCreate,
)
from studio.services.feed import get_comments
from studio.services.mutations import add_comment, create_post, toggle_like
from studio.session import get_viewer_id

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=MutationResult, status_code=status.HTTP_201_CREATED)
async def create_post_endpoint(
    body: PostCreate,
    response: Response,
    viewer_id: Optional[str] = Depends(get_viewer_id),
    db: AsyncSession = Depends(get_db),
):
    try:
        image = base64.b64decode(body.image_base64, validate=True)
    except (binascii.Error, ValueError):
        raise HTTPException(status_code=422, detail="image_base64 is not valid base64")

    result = await create_post(db, viewer_id, body.caption, image, body.image_content_type)
    if not result.success:
        response.status_code = status.HTTP_400_BAD_REQUEST
    return result


@router.post("/{post_id}/like", response_model=LikeToggleResult)
async def like_post(
    post_id: str,
    response: Response,
    viewer_id: Optional[str] = Depends(get_viewer_id),
    db: AsyncSession = Depends(get_db),
):
    """Toggle: likes the post if the viewer hasn't, unlikes it otherwise."""
    result = await toggle_like(db, post_id, viewer_id)
    if not result.success:
        response.status_code = status.HTTP_400_BAD_REQUEST
    return result


@router.post(
    "/{post_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def comment_on_post(
    post_id: str,
    body: CommentCreate,
    viewer_id: Optional[str] = Depends(get_viewer_id),
    db: AsyncSession = Depends(get_db),
):
    return await add_comment(db, post_id, viewer_id, body.content)


@router.get("/{post_id}/comments", response_model=list[CommentResponse])
async def list_comments(post_id: str, db: AsyncSession = Depends(get_db)):
    return await get_comments(db, post_id)
