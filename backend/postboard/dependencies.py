"""
Postboard Backend — FastAPI Dependencies
==========================================

What:  Per-request collaborators injected into route handlers.

    get_repository   → SqlAlchemyBlogRepository bound to the request's session
    get_current_user → AuthorRecord of the caller (Authorization: Bearer <jwt>)

Why dependencies instead of globals:
    The caller is an explicit parameter of every mutating service call, and
    tests swap the repository through `app.dependency_overrides`.
"""

import logging

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from postboard.database import get_db_session
from postboard.exceptions import AuthenticationError
from postboard.middleware.request_id import request_id_var
from postboard.repositories import BlogRepository, SqlAlchemyBlogRepository
from postboard.schemas.post import AuthorRecord
from postboard.security import user_id_from_token

logger = logging.getLogger(__name__)


async def get_repository(
    db: AsyncSession = Depends(get_db_session),
) -> BlogRepository:
    return SqlAlchemyBlogRepository(db)


def _extract_bearer_token(authorization: str | None) -> str:
    raw = (authorization or "").strip()
    if not raw:
        raise AuthenticationError("Missing Authorization header")

    scheme, _, token = raw.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Authorization must be: Bearer <token>")
    return token.strip()


async def get_current_user(
    authorization: str | None = Header(default=None),
    repo: BlogRepository = Depends(get_repository),
) -> AuthorRecord:
    """
    Resolve the authenticated caller.

    Raises:
        AuthenticationError: header missing/malformed, token invalid or
            expired, or the token's user no longer exists (→ 401)
    """
    user_id = user_id_from_token(_extract_bearer_token(authorization))
    user = await repo.get_user(user_id)
    if user is None:
        logger.warning("[%s] Token for unknown user %d", request_id_var.get(""), user_id)
        raise AuthenticationError("User for this token no longer exists")
    return user
