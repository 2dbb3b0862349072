"""
Postboard Backend — Post Service (Business Logic)
===================================================

What:  Listing, retrieval, creation, update and deletion of posts.
Why:   Keeps validation and ownership rules out of the route handlers.
How:   Every method receives the BlogRepository for the current request and,
       for mutations, the authenticated caller.
Who:   Called by the handlers in `postboard.routes.posts`.

Ownership Flow (PUT / DELETE):
    ┌────────────────────┐  row matched   ┌──────────────┐
    │ conditional write  │───────────────▶│ return post  │
    │ WHERE id AND owner │                └──────────────┘
    └────────────────────┘
              │ no row
              ▼
    ┌────────────────────┐  missing  → NotFoundError  (404)
    │   get_post(id)     │
    └────────────────────┘  present  → ForbiddenError (403)

    The follow-up read only chooses the error; it never guards a write.

Tag Normalization:
    Creation and update both run tag names through normalize_tag_names()
    (trim, lowercase, drop duplicates while keeping first-seen order), so
    "Toys" and "toys" always land on the same Tag.
"""

import logging
from typing import Iterable, List, Optional

from postboard.config import settings
from postboard.exceptions import ForbiddenError, NotFoundError, ValidationError
from postboard.middleware.request_id import request_id_var
from postboard.repositories.base import BlogRepository
from postboard.schemas.post import AuthorRecord, PostCreate, PostRecord, PostUpdate

logger = logging.getLogger(__name__)


def normalize_tag_names(names: Iterable[str]) -> List[str]:
    """
    Canonical tag names for a request.

    Raises:
        ValidationError: a name is blank once surrounding whitespace is removed
    """
    normalized: List[str] = []
    for name in names:
        tag = name.strip().lower()
        if not tag:
            raise ValidationError(message="Tag names must not be blank", field="tags")
        if tag not in normalized:
            normalized.append(tag)
    return normalized


def _parse_page_number(value: Optional[str], field: str, default: int) -> int:
    if value is None:
        return default
    try:
        number = int(value.strip())
    except ValueError:
        raise ValidationError(message="Invalid type for page or limit", field=field)
    if number < 1:
        raise ValidationError(message=f"'{field}' must be a positive integer", field=field)
    return number


class PostService:
    """
    Business logic layer for post operations.

    Stateless: the repository and caller are passed into each call.
    """

    async def list_posts(
        self,
        repo: BlogRepository,
        category: str,
        page: Optional[str] = None,
        limit: Optional[str] = None,
    ) -> List[PostRecord]:
        """
        One page of a category's posts, newest first.

        Args:
            category: Category name from the path (required, non-blank)
            page:     1-based page number as sent in the query string (default "1")
            limit:    Page size as sent in the query string
                      (default settings.posts_default_page_size)

        Returns:
            Posts ranked (page-1)*limit+1 .. page*limit by recency. Unknown
            categories and pages past the end give an empty list.

        Raises:
            ValidationError: blank category, non-numeric or non-positive
                page/limit, or limit above settings.posts_max_page_size
        """
        category = (category or "").strip()
        if not category:
            raise ValidationError(message="Category to be provided", field="category")

        page_number = _parse_page_number(page, "page", 1)
        page_size = _parse_page_number(limit, "limit", settings.posts_default_page_size)
        if page_size > settings.posts_max_page_size:
            raise ValidationError(
                message=f"'limit' must not exceed {settings.posts_max_page_size}",
                field="limit",
                context={"max_limit": settings.posts_max_page_size},
            )

        offset = (page_number - 1) * page_size
        return await repo.list_posts_by_category(category, offset=offset, limit=page_size)

    async def get_post(self, repo: BlogRepository, post_id: int) -> PostRecord:
        """
        Raises:
            NotFoundError: no post with this id (→ 404)
        """
        post = await repo.get_post(post_id)
        if post is None:
            raise NotFoundError(resource="post", resource_id=post_id)
        return post

    async def create_post(
        self,
        repo: BlogRepository,
        author: AuthorRecord,
        payload: PostCreate,
    ) -> PostRecord:
        """
        Create a post authored by the caller.

        Workflow:
            1. Normalize tag names (rejects blank names)
            2. Resolve the category by name (unknown → ValidationError)
            3. Insert the post, connecting or creating each tag

        Returns:
            The stored post with category, tags and author projection
        """
        tag_names = normalize_tag_names(payload.tags)

        category = await repo.get_category_by_name(payload.category)
        if category is None:
            raise ValidationError(
                message=f"Category '{payload.category}' does not exist",
                field="category",
            )

        post = await repo.create_post(
            author_id=author.id,
            category_id=category.id,
            title=payload.title,
            content=payload.content,
            tag_names=tag_names,
        )
        logger.info(
            "Post %d created by user %d in category '%s' with %d tag(s)",
            post.id, author.id, category.name, len(post.tags),
        )
        return post

    async def update_post(
        self,
        repo: BlogRepository,
        author: AuthorRecord,
        post_id: int,
        payload: PostUpdate,
    ) -> PostRecord:
        """
        Overwrite title and content and connect tags on the caller's post.

        Category and author are never touched. Tags are added to the post's
        existing tags.

        Raises:
            NotFoundError:  post does not exist (→ 404)
            ForbiddenError: post belongs to someone else (→ 403), nothing written
        """
        tag_names = normalize_tag_names(payload.tags)

        post = await repo.update_post_owned(
            post_id=post_id,
            author_id=author.id,
            title=payload.title,
            content=payload.content,
            tag_names=tag_names,
        )
        if post is None:
            await self._raise_missing_or_forbidden(repo, post_id, author)

        logger.info("Post %d updated by user %d", post_id, author.id)
        return post

    async def delete_post(
        self,
        repo: BlogRepository,
        author: AuthorRecord,
        post_id: int,
    ) -> None:
        """
        Delete the caller's post together with its comments and tag links.

        Raises:
            NotFoundError:  post does not exist (→ 404)
            ForbiddenError: post belongs to someone else (→ 403)
        """
        deleted = await repo.delete_post_owned(post_id=post_id, author_id=author.id)
        if not deleted:
            await self._raise_missing_or_forbidden(repo, post_id, author)

        logger.info("Post %d deleted by user %d", post_id, author.id)

    async def _raise_missing_or_forbidden(
        self,
        repo: BlogRepository,
        post_id: int,
        author: AuthorRecord,
    ) -> None:
        existing = await repo.get_post(post_id)
        if existing is None:
            raise NotFoundError(resource="post", resource_id=post_id)
        logger.warning(
            "[%s] User %d denied write on post %d owned by user %d",
            request_id_var.get(""), author.id, post_id, existing.user_id,
        )
        raise ForbiddenError(resource="post", resource_id=post_id)


# ── Singleton Instance ────────────────────────────────────────────────────
post_service = PostService()
