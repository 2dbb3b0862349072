"""
Postboard Backend — Comment Route Handlers
============================================

    POST   /posts/{post_id}/comments   → 201 {"comment": ...}
    PUT    /comments/{comment_id}      → 200 {"comment": ...}
    DELETE /comments/{comment_id}      → 204, empty body

All three require a bearer token; update and delete are limited to the
comment's author.
"""

from fastapi import APIRouter, Depends, Response

from postboard.dependencies import get_current_user, get_repository
from postboard.repositories.base import BlogRepository
from postboard.schemas.comment import CommentEnvelope, CommentWrite
from postboard.schemas.common import ErrorResponse
from postboard.schemas.post import AuthorRecord
from postboard.services.comment_service import comment_service

router = APIRouter(tags=["Comments"])

_ERRORS = {
    400: {"description": "Invalid input", "model": ErrorResponse},
    401: {"description": "Missing or invalid access token", "model": ErrorResponse},
    404: {"description": "Post or comment not found", "model": ErrorResponse},
}


@router.post(
    "/posts/{post_id}/comments",
    response_model=CommentEnvelope,
    status_code=201,
    responses=_ERRORS,
    summary="Comment on a post",
)
async def create_comment(
    post_id: int,
    payload: CommentWrite,
    user: AuthorRecord = Depends(get_current_user),
    repo: BlogRepository = Depends(get_repository),
) -> CommentEnvelope:
    comment = await comment_service.create_comment(repo, user, post_id, payload)
    return CommentEnvelope(comment=comment)


@router.put(
    "/comments/{comment_id}",
    response_model=CommentEnvelope,
    responses={**_ERRORS, 403: {"description": "Caller is not the author", "model": ErrorResponse}},
    summary="Edit your own comment",
)
async def update_comment(
    comment_id: int,
    payload: CommentWrite,
    user: AuthorRecord = Depends(get_current_user),
    repo: BlogRepository = Depends(get_repository),
) -> CommentEnvelope:
    comment = await comment_service.update_comment(repo, user, comment_id, payload)
    return CommentEnvelope(comment=comment)


@router.delete(
    "/comments/{comment_id}",
    status_code=204,
    response_class=Response,
    responses={**_ERRORS, 403: {"description": "Caller is not the author", "model": ErrorResponse}},
    summary="Delete your own comment",
)
async def delete_comment(
    comment_id: int,
    user: AuthorRecord = Depends(get_current_user),
    repo: BlogRepository = Depends(get_repository),
) -> Response:
    await comment_service.delete_comment(repo, user, comment_id)
    return Response(status_code=204)
