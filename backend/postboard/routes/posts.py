"""
Postboard Backend — Post Route Handlers
=========================================

What:  HTTP endpoints for listing, reading, creating, updating and deleting posts.
How:   Extract path/query/body, delegate to PostService, wrap the result in
       the response envelope (`{"post": ...}` / `{"posts": [...]}`).

Route Matching:
    GET /posts/{post_id:int} is registered before GET /posts/{category}, so a
    purely numeric segment is always a post id and anything else is a
    category name.
"""

from fastapi import APIRouter, Depends, Query

from postboard.dependencies import get_current_user, get_repository
from postboard.repositories.base import BlogRepository
from postboard.schemas.common import ErrorResponse, MessageResponse
from postboard.schemas.post import (
    AuthorRecord,
    PostCreate,
    PostEnvelope,
    PostListEnvelope,
    PostUpdate,
)
from postboard.services.post_service import post_service

router = APIRouter(tags=["Posts"])

_ERRORS = {
    400: {"description": "Invalid input", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}
_AUTH_ERRORS = {
    **_ERRORS,
    401: {"description": "Missing or invalid access token", "model": ErrorResponse},
    403: {"description": "Caller is not the author", "model": ErrorResponse},
    404: {"description": "Post not found", "model": ErrorResponse},
}


@router.get(
    "/posts/{post_id:int}",
    response_model=PostEnvelope,
    responses={**_ERRORS, 404: {"description": "Post not found", "model": ErrorResponse}},
    summary="Get a single post by ID",
)
async def get_post(
    post_id: int,
    repo: BlogRepository = Depends(get_repository),
) -> PostEnvelope:
    post = await post_service.get_post(repo, post_id)
    return PostEnvelope(post=post)


@router.get(
    "/posts/{category}",
    response_model=PostListEnvelope,
    responses=_ERRORS,
    summary="List a category's posts, newest first",
    description=(
        "Offset pagination: `page` is 1-based, `limit` is the page size. "
        "Both are validated by the service so malformed values answer 400."
    ),
)
async def list_posts(
    category: str,
    page: str | None = Query(default=None, description="1-based page number (default 1)"),
    limit: str | None = Query(default=None, description="Page size (default 25)"),
    repo: BlogRepository = Depends(get_repository),
) -> PostListEnvelope:
    posts = await post_service.list_posts(repo, category, page=page, limit=limit)
    return PostListEnvelope(posts=posts)


@router.post(
    "/posts",
    response_model=PostEnvelope,
    status_code=201,
    responses={k: v for k, v in _AUTH_ERRORS.items() if k not in (403, 404)},
    summary="Create a post as the authenticated user",
)
async def create_post(
    payload: PostCreate,
    user: AuthorRecord = Depends(get_current_user),
    repo: BlogRepository = Depends(get_repository),
) -> PostEnvelope:
    post = await post_service.create_post(repo, user, payload)
    return PostEnvelope(post=post)


@router.put(
    "/posts/{post_id}",
    response_model=PostEnvelope,
    responses=_AUTH_ERRORS,
    summary="Update title, content and tags of your own post",
)
async def update_post(
    post_id: int,
    payload: PostUpdate,
    user: AuthorRecord = Depends(get_current_user),
    repo: BlogRepository = Depends(get_repository),
) -> PostEnvelope:
    post = await post_service.update_post(repo, user, post_id, payload)
    return PostEnvelope(post=post)


@router.delete(
    "/posts/{post_id}",
    response_model=MessageResponse,
    responses=_AUTH_ERRORS,
    summary="Delete your own post and its comments",
)
async def delete_post(
    post_id: int,
    user: AuthorRecord = Depends(get_current_user),
    repo: BlogRepository = Depends(get_repository),
) -> MessageResponse:
    await post_service.delete_post(repo, user, post_id)
    return MessageResponse(message="Post deleted")
