"""Shared test fixtures.

Every test gets a fresh in-memory SQLite database. Tracing and the Redis
view cache are switched off through the environment before any studio
module reads its settings.
"""
from __future__ import annotations

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("TRACING_ENABLED", "false")
os.environ.setdefault("REDIS_ENABLED", "false")

from datetime import datetime
from typing import AsyncIterator, Optional

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from studio.database import Base
from studio.models import Comment, Follow, Like, Post, User


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def make_user(db_session: AsyncSession):
    """Create and commit a user; name defaults to the capitalised username."""
    async def _make(username: str, name: Optional[str] = None) -> User:
        user = User(username=username, name=name or username.title())
        db_session.add(user)
        await db_session.commit()
        return user

    return _make


@pytest.fixture
def follow(db_session: AsyncSession):
    async def _follow(follower: User, followee: User) -> None:
        db_session.add(Follow(follower_id=follower.id, followee_id=followee.id))
        await db_session.commit()

    return _follow


@pytest.fixture
def make_post(db_session: AsyncSession):
    async def _make(
        owner: User,
        caption: str = "A post",
        created_at: Optional[datetime] = None,
    ) -> Post:
        post = Post(user_id=owner.id, caption=caption, image="/placeholder.svg")
        if created_at is not None:
            post.created_at = created_at
        db_session.add(post)
        await db_session.commit()
        return post

    return _make


@pytest.fixture
def make_comment(db_session: AsyncSession):
    async def _make(
        post: Post,
        author: User,
        content: str,
        created_at: Optional[datetime] = None,
    ) -> Comment:
        comment = Comment(post_id=post.id, user_id=author.id, content=content)
        if created_at is not None:
            comment.created_at = created_at
        db_session.add(comment)
        await db_session.commit()
        return comment

    return _make


@pytest.fixture
def add_like(db_session: AsyncSession):
    async def _like(post: Post, user: User) -> None:
        db_session.add(Like(post_id=post.id, user_id=user.id))
        await db_session.commit()

    return _like


@pytest.fixture
async def api_client(session_factory) -> AsyncIterator[httpx.AsyncClient]:
    """HTTP client against the app, with get_db bound to the test database."""
    from studio.database import get_db
    from studio.main import app

    async def _get_test_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _get_test_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
