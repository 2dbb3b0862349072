"""
Postboard Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── repo:          InMemoryBlogRepository seeded with two users, two categories
    ├── alice / bob:   AuthorRecords of the seeded users
    ├── auth_headers:  builds an Authorization header for a user id
    ├── sql_session:   AsyncSession on an in-memory SQLite database (aiosqlite)
    └── test_client:   HTTPX AsyncClient with the repository overridden by `repo`
"""

import itertools
import os
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

# Override settings for testing BEFORE any postboard import
# Why: postboard.config builds its settings singleton at import time
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["JWT_SECRET"] = "test-secret-key-for-the-postboard-suite-0123456789"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

import postboard.models  # noqa: F401  (registers tables on Base.metadata)
from postboard.database import Base
from postboard.dependencies import get_repository
from postboard.repositories.base import BlogRepository
from postboard.schemas.comment import CommentRecord
from postboard.schemas.post import AuthorRecord, CategoryRecord, PostRecord, TagRecord
from postboard.security import create_access_token


# ══════════════════════════════════════════════════════════════════════════
# In-memory BlogRepository
# ══════════════════════════════════════════════════════════════════════════

class InMemoryBlogRepository(BlogRepository):
    """
    Dict-backed BlogRepository honouring the same contract as the SQL one.

    Timestamps come from a fake clock that advances one second per post, so
    "newest first" ordering is deterministic.
    """

    def __init__(self):
        self.users: Dict[int, AuthorRecord] = {}
        self.categories: Dict[int, CategoryRecord] = {}
        self.tags: Dict[int, TagRecord] = {}
        self.posts: Dict[int, dict] = {}
        self.comments: Dict[int, CommentRecord] = {}
        self._post_ids = itertools.count(1)
        self._comment_ids = itertools.count(1)
        self._tag_ids = itertools.count(1)
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    # ── Seeding helpers ───────────────────────────────────────────────────

    def add_user(self, user_id: int, first_name: str, last_name: str) -> AuthorRecord:
        user = AuthorRecord(id=user_id, first_name=first_name, last_name=last_name)
        self.users[user_id] = user
        return user

    def add_category(self, name: str) -> CategoryRecord:
        category = CategoryRecord(id=len(self.categories) + 1, name=name)
        self.categories[category.id] = category
        return category

    def seed_post(
        self,
        author_id: int,
        category: str,
        title: str,
        tags: Optional[List[str]] = None,
    ) -> PostRecord:
        category_id = next(c.id for c in self.categories.values() if c.name == category)
        post_id = next(self._post_ids)
        self.posts[post_id] = {
            "title": title,
            "content": f"content of {title}",
            "created_at": self._tick(),
            "user_id": author_id,
            "category_id": category_id,
            "tag_ids": [self._connect_or_create_tag(name) for name in tags or []],
        }
        return self._record(post_id)

    def seed_comment(self, post_id: int, author_id: int, content: str) -> CommentRecord:
        comment = CommentRecord(
            id=next(self._comment_ids),
            content=content,
            created_at=self._tick(),
            post_id=post_id,
            user_id=author_id,
        )
        self.comments[comment.id] = comment
        return comment

    # ── BlogRepository ────────────────────────────────────────────────────

    async def get_user(self, user_id: int) -> Optional[AuthorRecord]:
        return self.users.get(user_id)

    async def get_category_by_name(self, name: str) -> Optional[CategoryRecord]:
        return next((c for c in self.categories.values() if c.name == name), None)

    async def list_posts_by_category(
        self, category: str, offset: int, limit: int
    ) -> List[PostRecord]:
        matching = [
            post_id for post_id, row in self.posts.items()
            if self.categories[row["category_id"]].name == category
        ]
        matching.sort(key=lambda pid: (self.posts[pid]["created_at"], pid), reverse=True)
        return [self._record(pid) for pid in matching[offset:offset + limit]]

    async def get_post(self, post_id: int) -> Optional[PostRecord]:
        return self._record(post_id) if post_id in self.posts else None

    async def create_post(self, author_id, category_id, title, content, tag_names) -> PostRecord:
        post_id = next(self._post_ids)
        self.posts[post_id] = {
            "title": title,
            "content": content,
            "created_at": self._tick(),
            "user_id": author_id,
            "category_id": category_id,
            "tag_ids": [self._connect_or_create_tag(name) for name in tag_names],
        }
        return self._record(post_id)

    async def update_post_owned(self, post_id, author_id, title, content, tag_names):
        row = self.posts.get(post_id)
        if row is None or row["user_id"] != author_id:
            return None
        row["title"] = title
        row["content"] = content
        for name in tag_names:
            tag_id = self._connect_or_create_tag(name)
            if tag_id not in row["tag_ids"]:
                row["tag_ids"].append(tag_id)
        return self._record(post_id)

    async def delete_post_owned(self, post_id: int, author_id: int) -> bool:
        row = self.posts.get(post_id)
        if row is None or row["user_id"] != author_id:
            return False
        del self.posts[post_id]
        self.comments = {
            cid: c for cid, c in self.comments.items() if c.post_id != post_id
        }
        return True

    async def get_comment(self, comment_id: int) -> Optional[CommentRecord]:
        return self.comments.get(comment_id)

    async def create_comment(self, post_id: int, author_id: int, content: str) -> CommentRecord:
        return self.seed_comment(post_id, author_id, content)

    async def update_comment_owned(self, comment_id, author_id, content):
        comment = self.comments.get(comment_id)
        if comment is None or comment.user_id != author_id:
            return None
        updated = comment.model_copy(update={"content": content})
        self.comments[comment_id] = updated
        return updated

    async def delete_comment_owned(self, comment_id: int, author_id: int) -> bool:
        comment = self.comments.get(comment_id)
        if comment is None or comment.user_id != author_id:
            return False
        del self.comments[comment_id]
        return True

    # ── Internals ─────────────────────────────────────────────────────────

    def _tick(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

    def _connect_or_create_tag(self, name: str) -> int:
        for tag in self.tags.values():
            if tag.name == name:
                return tag.id
        tag = TagRecord(id=next(self._tag_ids), name=name)
        self.tags[tag.id] = tag
        return tag.id

    def _record(self, post_id: int) -> PostRecord:
        row = self.posts[post_id]
        return PostRecord(
            id=post_id,
            title=row["title"],
            content=row["content"],
            created_at=row["created_at"],
            user_id=row["user_id"],
            category_id=row["category_id"],
            category=self.categories[row["category_id"]],
            tags=[self.tags[tag_id] for tag_id in row["tag_ids"]],
            user=self.users[row["user_id"]],
        )


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def repo():
    repository = InMemoryBlogRepository()
    repository.add_user(1, "Alice", "Author")
    repository.add_user(2, "Bob", "Reader")
    repository.add_category("toys")
    repository.add_category("books")
    return repository


@pytest.fixture
def alice(repo):
    return repo.users[1]


@pytest.fixture
def bob(repo):
    return repo.users[2]


@pytest.fixture
def auth_headers():
    """
    Usage:
        response = await test_client.post("/posts", json=..., headers=auth_headers(1))
    """
    def _headers(user_id: int) -> Dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user_id)}"}
    return _headers


@pytest_asyncio.fixture
async def sql_session():
    """
    AsyncSession on a private in-memory SQLite database with all tables created.

    Exercises the real SqlAlchemyBlogRepository queries without PostgreSQL.
    """
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture
async def test_client(repo):
    """
    HTTPX AsyncClient talking to the FastAPI app through ASGITransport.

    The repository dependency is overridden with `repo`, so no database is
    touched. Lifespan is not run (no startup logging, no engine disposal).
    """
    from postboard.main import app

    app.dependency_overrides[get_repository] = lambda: repo
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
