"""
Postboard Backend — SQLAlchemy Blog Repository
================================================

What:  BlogRepository implementation on an async SQLAlchemy session.
How:   One instance per request, wrapping the session from get_db_session.
       The repository only flushes; get_db_session commits or rolls back, so
       every statement of a request lands in one transaction.
Who:   Built by `postboard.dependencies.get_repository`.

Ownership in one statement:
    update_post_owned, delete_post_owned, update_comment_owned and
    delete_comment_owned put `user_id = :caller` into the WHERE clause of the
    write itself and report the affected row count. There is no
    lookup-then-write window for a concurrent request to slip into.

Id range:
    Ids above MAX_ROW_ID cannot exist in an INTEGER column, so lookups and
    owned writes answer them like any other missing row instead of sending
    an out-of-range parameter to the driver.

Relationship loading:
    Post relationships are declared lazy="raise"; every query that returns
    posts attaches selectinload() options for tags, category and user.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from sqlalchemy import delete, desc, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from postboard.exceptions import DatabaseError
from postboard.models import Category, Comment, Post, Tag, User, post_tags
from postboard.repositories.base import BlogRepository
from postboard.schemas.comment import CommentRecord
from postboard.schemas.post import AuthorRecord, CategoryRecord, PostRecord

logger = logging.getLogger(__name__)

# Primary keys are INTEGER (int4 on PostgreSQL); larger ids cannot name a row
MAX_ROW_ID = 2**31 - 1
# OFFSET is a signed 64-bit value on both SQLite and PostgreSQL
MAX_OFFSET = 2**63 - 1


def _is_row_id(value: int) -> bool:
    return 1 <= value <= MAX_ROW_ID


@contextmanager
def _translate_errors(operation: str) -> Iterator[None]:
    """Re-raise SQLAlchemy failures as DatabaseError, logging the original."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.error("Database error during %s: %s", operation, str(e), exc_info=True)
        raise DatabaseError(
            context={"operation": operation, "error_type": type(e).__name__},
        ) from e


def _post_load_options():
    return (
        selectinload(Post.tags),
        selectinload(Post.category),
        selectinload(Post.user),
    )


class SqlAlchemyBlogRepository(BlogRepository):
    """Relational storage for posts and comments."""

    def __init__(self, session: AsyncSession):
        self.session = session

    # ── Users & categories ────────────────────────────────────────────────

    async def get_user(self, user_id: int) -> Optional[AuthorRecord]:
        if not _is_row_id(user_id):
            return None
        with _translate_errors("get_user"):
            user = await self.session.get(User, user_id)
        return AuthorRecord.model_validate(user) if user is not None else None

    async def get_category_by_name(self, name: str) -> Optional[CategoryRecord]:
        with _translate_errors("get_category_by_name"):
            result = await self.session.execute(
                select(Category).where(Category.name == name)
            )
            category = result.scalar_one_or_none()
        return CategoryRecord.model_validate(category) if category is not None else None

    # ── Posts ─────────────────────────────────────────────────────────────

    async def list_posts_by_category(
        self, category: str, offset: int, limit: int
    ) -> List[PostRecord]:
        if offset > MAX_OFFSET:
            return []
        query = (
            select(Post)
            .join(Post.category)
            .where(Category.name == category)
            .options(*_post_load_options())
            .order_by(desc(Post.created_at), desc(Post.id))
            .offset(offset)
            .limit(limit)
        )
        with _translate_errors("list_posts_by_category"):
            result = await self.session.execute(query)
            posts = result.scalars().all()
        return [PostRecord.model_validate(post) for post in posts]

    async def get_post(self, post_id: int) -> Optional[PostRecord]:
        if not _is_row_id(post_id):
            return None
        with _translate_errors("get_post"):
            post = await self._load_post(post_id)
        return PostRecord.model_validate(post) if post is not None else None

    async def create_post(
        self,
        author_id: int,
        category_id: int,
        title: str,
        content: str,
        tag_names: List[str],
    ) -> PostRecord:
        with _translate_errors("create_post"):
            tags = await self._connect_or_create_tags(tag_names)
            post = Post(
                title=title,
                content=content,
                user_id=author_id,
                category_id=category_id,
                tags=tags,
            )
            self.session.add(post)
            await self.session.flush()
            created = await self._load_post(post.id)
        return PostRecord.model_validate(created)

    async def update_post_owned(
        self,
        post_id: int,
        author_id: int,
        title: str,
        content: str,
        tag_names: List[str],
    ) -> Optional[PostRecord]:
        if not _is_row_id(post_id):
            return None
        with _translate_errors("update_post"):
            result = await self.session.execute(
                update(Post)
                .where(Post.id == post_id, Post.user_id == author_id)
                .values(title=title, content=content)
            )
            if result.rowcount == 0:
                return None

            post = await self._load_post(post_id)
            for tag in await self._connect_or_create_tags(tag_names):
                if tag not in post.tags:
                    post.tags.append(tag)
            await self.session.flush()
            updated = await self._load_post(post_id)
        return PostRecord.model_validate(updated)

    async def delete_post_owned(self, post_id: int, author_id: int) -> bool:
        if not _is_row_id(post_id):
            return False
        owned = select(Post.id).where(Post.id == post_id, Post.user_id == author_id)
        with _translate_errors("delete_post"):
            await self.session.execute(
                delete(Comment)
                .where(Comment.post_id.in_(owned))
                .execution_options(synchronize_session=False)
            )
            await self.session.execute(
                delete(post_tags).where(post_tags.c.post_id.in_(owned))
            )
            result = await self.session.execute(
                delete(Post).where(Post.id == post_id, Post.user_id == author_id)
            )
        return result.rowcount > 0

    # ── Comments ──────────────────────────────────────────────────────────

    async def get_comment(self, comment_id: int) -> Optional[CommentRecord]:
        if not _is_row_id(comment_id):
            return None
        with _translate_errors("get_comment"):
            comment = await self.session.get(Comment, comment_id, populate_existing=True)
        return CommentRecord.model_validate(comment) if comment is not None else None

    async def create_comment(
        self, post_id: int, author_id: int, content: str
    ) -> CommentRecord:
        with _translate_errors("create_comment"):
            comment = Comment(content=content, post_id=post_id, user_id=author_id)
            self.session.add(comment)
            await self.session.flush()
        return CommentRecord.model_validate(comment)

    async def update_comment_owned(
        self, comment_id: int, author_id: int, content: str
    ) -> Optional[CommentRecord]:
        if not _is_row_id(comment_id):
            return None
        with _translate_errors("update_comment"):
            result = await self.session.execute(
                update(Comment)
                .where(Comment.id == comment_id, Comment.user_id == author_id)
                .values(content=content)
            )
            if result.rowcount == 0:
                return None
            comment = await self.session.get(Comment, comment_id, populate_existing=True)
        return CommentRecord.model_validate(comment)

    async def delete_comment_owned(self, comment_id: int, author_id: int) -> bool:
        if not _is_row_id(comment_id):
            return False
        with _translate_errors("delete_comment"):
            result = await self.session.execute(
                delete(Comment).where(Comment.id == comment_id, Comment.user_id == author_id)
            )
        return result.rowcount > 0

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _load_post(self, post_id: int) -> Optional[Post]:
        # populate_existing: an earlier bulk UPDATE in this session must not
        # leave stale attributes on the identity-map copy
        result = await self.session.execute(
            select(Post)
            .where(Post.id == post_id)
            .options(*_post_load_options())
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def _connect_or_create_tags(self, names: List[str]) -> List[Tag]:
        tags = []
        for name in names:
            result = await self.session.execute(select(Tag).where(Tag.name == name))
            tag = result.scalar_one_or_none()
            if tag is None:
                tag = Tag(name=name)
                self.session.add(tag)
                await self.session.flush()
                logger.debug("Created tag '%s' (id=%s)", name, tag.id)
            tags.append(tag)
        return tags
