"""
Postboard Backend — Abstract Blog Repository Interface
=======================================================

What:  Abstract base class defining every data-access operation the services use.
Why:   Services depend on this contract instead of on SQLAlchemy, so the
       storage backend can be replaced and the services can be unit tested
       against an in-memory implementation.
How:   SqlAlchemyBlogRepository implements it on an AsyncSession; the test
       suite ships an in-memory fake.
Who:   Called by PostService, CommentService and the auth dependency.

Contract:
    - Lookups by id or name return None when nothing matches; they never raise
      for absence.
    - Mutations that are restricted to the author take the caller's id and
      apply it inside the same statement as the write. They return None/False
      when no row matched, leaving it to the service to tell "missing" from
      "not yours".
    - Tag names arrive already normalized; the repository connects each one
      to an existing Tag or creates it.
    - Implementation-specific failures are wrapped in DatabaseError.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from postboard.schemas.comment import CommentRecord
from postboard.schemas.post import AuthorRecord, CategoryRecord, PostRecord


class BlogRepository(ABC):
    """Storage contract for posts, comments, tags, categories and users."""

    # ── Users & categories (read-only) ────────────────────────────────────

    @abstractmethod
    async def get_user(self, user_id: int) -> Optional[AuthorRecord]:
        """Reduced projection of a user, or None."""
        ...

    @abstractmethod
    async def get_category_by_name(self, name: str) -> Optional[CategoryRecord]:
        ...

    # ── Posts ─────────────────────────────────────────────────────────────

    @abstractmethod
    async def list_posts_by_category(
        self, category: str, offset: int, limit: int
    ) -> List[PostRecord]:
        """
        Posts whose category is named `category`, newest first.

        Ordering: created_at DESC, then id DESC so equal timestamps page
        deterministically. Each record includes tags and the author projection.
        """
        ...

    @abstractmethod
    async def get_post(self, post_id: int) -> Optional[PostRecord]:
        """Post with category, tags and author projection, or None."""
        ...

    @abstractmethod
    async def create_post(
        self,
        author_id: int,
        category_id: int,
        title: str,
        content: str,
        tag_names: List[str],
    ) -> PostRecord:
        ...

    @abstractmethod
    async def update_post_owned(
        self,
        post_id: int,
        author_id: int,
        title: str,
        content: str,
        tag_names: List[str],
    ) -> Optional[PostRecord]:
        """
        Overwrite title and content and connect tags, only if `author_id`
        owns the post.

        Returns:
            The updated post, or None when no post matched both id and author.
            Existing tag links are kept; new names are added.
        """
        ...

    @abstractmethod
    async def delete_post_owned(self, post_id: int, author_id: int) -> bool:
        """
        Delete the post with its comments and tag links, only if owned by
        `author_id`. Tag rows are left in place.

        Returns:
            True when a post was deleted.
        """
        ...

    # ── Comments ──────────────────────────────────────────────────────────

    @abstractmethod
    async def get_comment(self, comment_id: int) -> Optional[CommentRecord]:
        ...

    @abstractmethod
    async def create_comment(
        self, post_id: int, author_id: int, content: str
    ) -> CommentRecord:
        ...

    @abstractmethod
    async def update_comment_owned(
        self, comment_id: int, author_id: int, content: str
    ) -> Optional[CommentRecord]:
        """Updated comment, or None when no comment matched both id and author."""
        ...

    @abstractmethod
    async def delete_comment_owned(self, comment_id: int, author_id: int) -> bool:
        ...
