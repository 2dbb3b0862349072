"""
Postboard Backend — Comment Service
=====================================

What:  Create, update and delete comments on posts.
How:   Same ownership flow as PostService: the write carries the caller's id
       in its WHERE clause, and only when nothing matched does the service
       read the comment to choose between 404 and 403.
"""

import logging

from postboard.exceptions import ForbiddenError, NotFoundError
from postboard.middleware.request_id import request_id_var
from postboard.repositories.base import BlogRepository
from postboard.schemas.comment import CommentRecord, CommentWrite
from postboard.schemas.post import AuthorRecord

logger = logging.getLogger(__name__)


class CommentService:

    async def create_comment(
        self,
        repo: BlogRepository,
        author: AuthorRecord,
        post_id: int,
        payload: CommentWrite,
    ) -> CommentRecord:
        """
        Attach a comment by the caller to an existing post.

        Raises:
            NotFoundError: the post does not exist (→ 404)
        """
        if await repo.get_post(post_id) is None:
            raise NotFoundError(resource="post", resource_id=post_id)

        comment = await repo.create_comment(
            post_id=post_id, author_id=author.id, content=payload.content
        )
        logger.info("Comment %d added to post %d by user %d", comment.id, post_id, author.id)
        return comment

    async def update_comment(
        self,
        repo: BlogRepository,
        author: AuthorRecord,
        comment_id: int,
        payload: CommentWrite,
    ) -> CommentRecord:
        comment = await repo.update_comment_owned(
            comment_id=comment_id, author_id=author.id, content=payload.content
        )
        if comment is None:
            await self._raise_missing_or_forbidden(repo, comment_id, author)

        logger.info("Comment %d updated by user %d", comment_id, author.id)
        return comment

    async def delete_comment(
        self,
        repo: BlogRepository,
        author: AuthorRecord,
        comment_id: int,
    ) -> None:
        deleted = await repo.delete_comment_owned(comment_id=comment_id, author_id=author.id)
        if not deleted:
            await self._raise_missing_or_forbidden(repo, comment_id, author)

        logger.info("Comment %d deleted by user %d", comment_id, author.id)

    async def _raise_missing_or_forbidden(
        self,
        repo: BlogRepository,
        comment_id: int,
        author: AuthorRecord,
    ) -> None:
        existing = await repo.get_comment(comment_id)
        if existing is None:
            raise NotFoundError(resource="comment", resource_id=comment_id)
        logger.warning(
            "[%s] User %d denied write on comment %d owned by user %d",
            request_id_var.get(""), author.id, comment_id, existing.user_id,
        )
        raise ForbiddenError(resource="comment", resource_id=comment_id)


comment_service = CommentService()
