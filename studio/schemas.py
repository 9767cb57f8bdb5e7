"""
Pydantic request / response schemas for the API layer.
Kept separate from ORM models to avoid coupling transport to storage.
Generation form bodies live in studio.forms.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


# ──────────────────────────── Users ───────────────────────────────────────

class UserCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=100)
    name: str = Field(..., min_length=1, max_length=255)
    image: Optional[str] = None


class UserResponse(BaseModel):
    id: str
    name: str
    username: str
    image: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True


class UserPublic(BaseModel):
    """Owner profile fields attached to each feed post."""
    id: str
    name: str
    username: str
    image: Optional[str] = None

    class Config:
        from_attributes = True


class FollowRequest(BaseModel):
    follower_id: str
    followee_id: str


# ──────────────────────────── Comments ────────────────────────────────────

class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1)


class CommentAuthor(BaseModel):
    username: str


class CommentResponse(BaseModel):
    id: str
    post_id: str
    user_id: str
    content: str
    created_at: datetime
    user: CommentAuthor


# ──────────────────────────── Posts ───────────────────────────────────────

class PostCreate(BaseModel):
    caption: str = Field(..., min_length=1, max_length=2200)
    # Base64-encoded image payload
    image_base64: str = Field(..., min_length=1)
    image_content_type: str = Field("image/jpeg", pattern="^image/")


class MutationResult(BaseModel):
    success: bool
    error: Optional[str] = None
    post_id: Optional[str] = None


class LikeToggleResult(MutationResult):
    liked: Optional[bool] = None
    likes: Optional[int] = None


# ──────────────────────────── Feed ────────────────────────────────────────

class FeedPost(BaseModel):
    """A post as shown in the viewer's feed, with aggregates."""
    id: str
    user: UserPublic
    image: str
    caption: str
    likes: int
    has_liked: bool
    # Most recent first, capped at feed_comment_preview
    comments: list[CommentResponse]
    created_at: datetime


class FeedResponse(BaseModel):
    viewer_id: Optional[str]
    posts: list[FeedPost]
    cached: bool = False


class ExplorePost(BaseModel):
    id: str
    image: str
    caption: str
    username: str
    likes: int
    comments: int
    created_at: datetime


# ──────────────────────────── Generation ──────────────────────────────────

class ContentTemplateInfo(BaseModel):
    category: str
    slug: str
    content_type: str
    # JSON schema of the form body accepted by POST /generate/{category}/{slug}
    form_schema: dict


class GeneratedContentResponse(BaseModel):
    category: str
    content_type: str
    content: str
    # content wrapped in a standalone HTML document for sandboxed preview
    document: str
