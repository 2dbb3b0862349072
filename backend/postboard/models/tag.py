"""
Postboard Backend — Tag SQLAlchemy Model
==========================================

What:  Tags shared across posts, plus the `post_tags` association table.
How:   Tags are created on demand when a post references a name that does
       not exist yet (connect-or-create). They are never deleted here:
       removing a post only removes its rows in `post_tags`.

Names are stored normalized (trimmed, lowercase); the unique constraint on
`name` is what makes connect-or-create idempotent.
"""

from sqlalchemy import Column, ForeignKey, Integer, String, Table
from sqlalchemy.orm import Mapped, mapped_column

from postboard.database import Base


post_tags = Table(
    "post_tags",
    Base.metadata,
    Column("post_id", ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


class Tag(Base):
    __tablename__ = "tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, name='{self.name}')>"
