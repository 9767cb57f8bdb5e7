"""Tests for the read side: feed visibility, aggregates and degrade-to-empty."""

from datetime import datetime, timedelta
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from studio.config import settings
from studio.models import Post
from studio.services.feed import get_comments, get_explore_posts, get_posts
from studio.services.mutations import toggle_like

T0 = datetime(2025, 3, 1, 12, 0, 0)


# =============================================================================
# Visibility
# =============================================================================

@pytest.mark.asyncio
async def test_feed_contains_own_and_followed_posts_only(make_user, follow, make_post, db_session):
    viewer = await make_user("viewer")
    friend = await make_user("friend")
    stranger = await make_user("stranger")
    await follow(viewer, friend)

    own = await make_post(viewer, "mine")
    followed = await make_post(friend, "from a friend")
    await make_post(stranger, "not for you")

    posts = await get_posts(db_session, viewer.id)
    assert {p.id for p in posts} == {own.id, followed.id}


@pytest.mark.asyncio
async def test_follow_is_directional(make_user, follow, make_post, db_session):
    a = await make_user("alice")
    b = await make_user("bob")
    await follow(a, b)
    a_post = await make_post(a, "alice's")

    # b does not follow a
    posts = await get_posts(db_session, b.id)
    assert a_post.id not in {p.id for p in posts}


@pytest.mark.asyncio
async def test_own_posts_without_any_follows(make_user, make_post, db_session):
    loner = await make_user("loner")
    post = await make_post(loner, "talking to myself")

    posts = await get_posts(db_session, loner.id)
    assert [p.id for p in posts] == [post.id]


@pytest.mark.asyncio
async def test_no_viewer_gets_empty_feed(make_user, make_post, db_session):
    author = await make_user("author")
    await make_post(author)
    assert await get_posts(db_session, None) == []


# =============================================================================
# Ordering & aggregates
# =============================================================================

@pytest.mark.asyncio
async def test_newest_first_and_page_size(make_user, make_post, db_session, monkeypatch):
    monkeypatch.setattr(settings, "feed_page_size", 3)
    viewer = await make_user("viewer")
    created = [
        await make_post(viewer, f"post {i}", created_at=T0 + timedelta(minutes=i))
        for i in range(5)
    ]

    posts = await get_posts(db_session, viewer.id)
    assert [p.caption for p in posts] == ["post 4", "post 3", "post 2"]
    assert posts[0].id == created[4].id


@pytest.mark.asyncio
async def test_default_page_size_is_ten(make_user, make_post, db_session):
    viewer = await make_user("viewer")
    for i in range(12):
        await make_post(viewer, f"post {i}", created_at=T0 + timedelta(minutes=i))

    posts = await get_posts(db_session, viewer.id)
    assert len(posts) == 10


@pytest.mark.asyncio
async def test_owner_profile_attached(make_user, follow, make_post, db_session):
    viewer = await make_user("viewer")
    owner = await make_user("owner", name="Olivia Owner")
    await follow(viewer, owner)
    await make_post(owner, "hello")

    (post,) = await get_posts(db_session, viewer.id)
    assert post.user.id == owner.id
    assert post.user.username == "owner"
    assert post.user.name == "Olivia Owner"
    assert post.user.image is None


@pytest.mark.asyncio
async def test_likes_and_has_liked(make_user, make_post, add_like, db_session):
    viewer = await make_user("viewer")
    other = await make_user("other")
    liked_by_viewer = await make_post(viewer, "liked", created_at=T0)
    liked_by_other = await make_post(viewer, "other liked", created_at=T0 + timedelta(minutes=1))
    await add_like(liked_by_viewer, viewer)
    await add_like(liked_by_viewer, other)
    await add_like(liked_by_other, other)

    posts = {p.id: p for p in await get_posts(db_session, viewer.id)}
    assert posts[liked_by_viewer.id].likes == 2
    assert posts[liked_by_viewer.id].has_liked is True
    assert posts[liked_by_other.id].likes == 1
    assert posts[liked_by_other.id].has_liked is False


@pytest.mark.asyncio
async def test_comment_preview_is_three_most_recent(make_user, make_post, make_comment, db_session):
    viewer = await make_user("viewer")
    commenter = await make_user("commenter")
    post = await make_post(viewer)
    for i in range(5):
        await make_comment(post, commenter, f"comment {i}", created_at=T0 + timedelta(minutes=i))

    (feed_post,) = await get_posts(db_session, viewer.id)
    assert [c.content for c in feed_post.comments] == ["comment 4", "comment 3", "comment 2"]
    assert all(c.user.username == "commenter" for c in feed_post.comments)


@pytest.mark.asyncio
async def test_comment_previews_are_per_post(make_user, make_post, make_comment, db_session):
    viewer = await make_user("viewer")
    first = await make_post(viewer, "first", created_at=T0)
    second = await make_post(viewer, "second", created_at=T0 + timedelta(minutes=1))
    for i in range(4):
        await make_comment(first, viewer, f"on first {i}", created_at=T0 + timedelta(minutes=i))
    await make_comment(second, viewer, "on second", created_at=T0)

    posts = {p.id: p for p in await get_posts(db_session, viewer.id)}
    assert len(posts[first.id].comments) == 3
    assert [c.content for c in posts[second.id].comments] == ["on second"]


@pytest.mark.asyncio
async def test_follow_then_like_scenario(make_user, follow, make_post, db_session):
    a = await make_user("alice")
    b = await make_user("bob")
    await follow(a, b)
    sunset = await make_post(b, "Sunset")

    (post,) = await get_posts(db_session, a.id)
    assert post.id == sunset.id
    assert post.caption == "Sunset"
    assert post.has_liked is False
    assert post.likes == 0
    assert post.comments == []

    result = await toggle_like(db_session, sunset.id, a.id)
    assert result.success

    (post,) = await get_posts(db_session, a.id)
    assert post.has_liked is True
    assert post.likes == 1


# =============================================================================
# Degrade-to-empty
# =============================================================================

@pytest.mark.asyncio
async def test_store_failure_yields_empty_feed(make_user, make_post, db_session, monkeypatch):
    viewer = await make_user("viewer")
    await make_post(viewer)
    monkeypatch.setattr(
        db_session,
        "execute",
        AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("database is down"))),
    )

    posts = await get_posts(db_session, viewer.id)
    assert posts == []
    assert len(posts) == 0


@pytest.mark.asyncio
async def test_store_failure_yields_empty_explore_and_comments(db_session, monkeypatch):
    monkeypatch.setattr(db_session, "execute", AsyncMock(side_effect=RuntimeError("boom")))
    assert await get_explore_posts(db_session) == []
    assert await get_comments(db_session, "missing") == []


# =============================================================================
# Explore & full comments
# =============================================================================

@pytest.mark.asyncio
async def test_explore_lists_everyone_with_counts(make_user, make_post, make_comment, add_like, db_session):
    a = await make_user("alice")
    b = await make_user("bob")
    old = await make_post(a, "old", created_at=T0)
    new = await make_post(b, "new", created_at=T0 + timedelta(hours=1))
    await add_like(old, a)
    await add_like(old, b)
    await make_comment(old, b, "nice")

    posts = await get_explore_posts(db_session)
    assert [p.id for p in posts] == [new.id, old.id]
    assert posts[0].username == "bob"
    assert (posts[0].likes, posts[0].comments) == (0, 0)
    assert (posts[1].likes, posts[1].comments) == (2, 1)


@pytest.mark.asyncio
async def test_explore_limit(make_user, make_post, db_session):
    author = await make_user("author")
    for i in range(15):
        await make_post(author, f"p{i}", created_at=T0 + timedelta(minutes=i))

    assert len(await get_explore_posts(db_session)) == 12
    assert len(await get_explore_posts(db_session, limit=4)) == 4


@pytest.mark.asyncio
async def test_full_comments_are_oldest_first_and_unbounded(make_user, make_post, make_comment, db_session):
    author = await make_user("author")
    post = await make_post(author)
    for i in range(6):
        await make_comment(post, author, f"c{i}", created_at=T0 + timedelta(minutes=i))

    comments = await get_comments(db_session, post.id)
    assert [c.content for c in comments] == [f"c{i}" for i in range(6)]


@pytest.mark.asyncio
async def test_explore_with_orphaned_post_degrades_to_empty(make_user, make_post, db_session):
    author = await make_user("author")
    await make_post(author, "fine")
    # SQLite does not enforce the users foreign key, so the owner can be missing
    db_session.add(Post(user_id="deleted-user", caption="orphan", image="/placeholder.svg"))
    await db_session.commit()

    assert await get_explore_posts(db_session) == []
