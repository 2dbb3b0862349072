"""Comment request/response schemas."""

from datetime import datetime

from pydantic import BaseModel, Field, StrictStr

from postboard.schemas.common import APIModel


class CommentRecord(APIModel):
    id: int
    content: str
    created_at: datetime
    post_id: int
    user_id: int


class CommentEnvelope(APIModel):
    comment: CommentRecord


class CommentWrite(BaseModel):
    """Body of POST /posts/{id}/comments and PUT /comments/{commentId}."""
    content: StrictStr = Field(min_length=1)
