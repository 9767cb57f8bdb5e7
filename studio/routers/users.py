"""
User management endpoints:
  POST /users          — create a user profile
  GET  /users/{id}     — fetch a user profile
  POST /users/follow   — follow another user
  POST /users/unfollow — unfollow
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from opentelemetry import trace
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from studio.clients.redis_client import invalidate_feeds
from studio.database import get_db
from studio.models import Follow, User
from studio.schemas import FollowRequest, UserCreate, UserResponse

logger = logging.getLogger(__name__)
router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.post("/", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(body: UserCreate, db: AsyncSession = Depends(get_db)):
    with tracer.start_as_current_span("create_user"):
        existing = await db.execute(
            select(User).where(User.username == body.username)
        )
        if existing.scalar_one_or_none():
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Username '{body.username}' already taken",
            )

        user = User(username=body.username, name=body.name, image=body.image)
        db.add(user)
        await db.flush()  # materialise id and created_at

        logger.info("Created user %s (id=%s)", user.username, user.id)
        return user


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, db: AsyncSession = Depends(get_db)):
    user = await db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.post("/follow", status_code=status.HTTP_204_NO_CONTENT)
async def follow_user(body: FollowRequest, db: AsyncSession = Depends(get_db)):
    """
    Create a follower → followee edge in the social graph.
    The followee's posts appear in the follower's feed from the next read.
    """
    with tracer.start_as_current_span("follow_user"):
        if body.follower_id == body.followee_id:
            raise HTTPException(status_code=400, detail="Cannot follow yourself")

        for uid in (body.follower_id, body.followee_id):
            if not await db.get(User, uid):
                raise HTTPException(status_code=404, detail=f"User {uid} not found")

        existing = await db.execute(
            select(Follow).where(
                Follow.follower_id == body.follower_id,
                Follow.followee_id == body.followee_id,
            )
        )
        if existing.scalar_one_or_none():
            return  # already following — idempotent

        db.add(Follow(follower_id=body.follower_id, followee_id=body.followee_id))
        await db.commit()
        await invalidate_feeds()
        logger.info("%s followed %s", body.follower_id, body.followee_id)


@router.post("/unfollow", status_code=status.HTTP_204_NO_CONTENT)
async def unfollow_user(body: FollowRequest, db: AsyncSession = Depends(get_db)):
    with tracer.start_as_current_span("unfollow_user"):
        await db.execute(
            delete(Follow).where(
                Follow.follower_id == body.follower_id,
                Follow.followee_id == body.followee_id,
            )
        )
        await db.commit()
        await invalidate_feeds()
