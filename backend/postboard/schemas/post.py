"""
Postboard Backend — Post Request/Response Schemas
===================================================

What:  API contract for posts, tags, categories and the reduced author view.
How:   Request bodies use strict string types so `{"title": 5}` is rejected
       instead of coerced; FastAPI validation failures are answered with 400
       by the handler registered in main.py.

Design Decision:
    Record models are what the repository returns, for both the SQLAlchemy
    implementation (validated from ORM objects) and the in-memory fake used
    in tests. Services never see ORM objects.
"""

from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import BaseModel, Field, StrictStr

from postboard.schemas.common import APIModel


# ══════════════════════════════════════════════════════════════════════════
# Records: what the API returns
# ══════════════════════════════════════════════════════════════════════════


class AuthorRecord(APIModel):
    """Reduced author projection: only id and names ever leave the service."""
    id: int
    first_name: str
    last_name: str


class CategoryRecord(APIModel):
    id: int
    name: str


class TagRecord(APIModel):
    id: int
    name: str


class PostRecord(APIModel):
    """
    Full post representation returned by every post endpoint.

    `user_id` is the author; `user` is the reduced projection of that author.
    """
    id: int
    title: str
    content: str
    created_at: datetime
    user_id: int
    category_id: int
    category: Optional[CategoryRecord] = None
    tags: List[TagRecord] = Field(default_factory=list)
    user: Optional[AuthorRecord] = None


class PostEnvelope(APIModel):
    post: PostRecord


class PostListEnvelope(APIModel):
    posts: List[PostRecord]


# ══════════════════════════════════════════════════════════════════════════
# Request bodies: what the client sends
# ══════════════════════════════════════════════════════════════════════════

TagName = Annotated[StrictStr, Field(min_length=1, max_length=100)]


class PostCreate(BaseModel):
    """
    Body of POST /posts.

    Every tag must be a string; normalization (trim, lowercase, de-duplicate)
    happens in PostService so create and update share one rule.
    """
    title: StrictStr = Field(min_length=1, max_length=255)
    content: StrictStr = Field(min_length=1)
    category: StrictStr = Field(min_length=1, max_length=100)
    tags: List[TagName]


class PostUpdate(BaseModel):
    """Body of PUT /posts/{id}. Category and author cannot be changed."""
    title: StrictStr = Field(min_length=1, max_length=255)
    content: StrictStr = Field(min_length=1)
    tags: List[TagName]
