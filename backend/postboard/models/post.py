"""
Postboard Backend — Post SQLAlchemy Model
===========================================

What:  ORM model representing the `posts` table.
Who:   Used by SqlAlchemyBlogRepository for CRUD and by Alembic.

Table Design:
    - user_id: the author. Set at creation, never updated.
    - category_id: exactly one category per post (NOT NULL).
    - tags: many-to-many through `post_tags`.
    - created_at: UTC with timezone; listing orders by it, newest first.

Query Patterns:
    - List by category: ... WHERE categories.name = :name
      ORDER BY created_at DESC, id DESC OFFSET :skip LIMIT :take
    - Conditional update/delete: ... WHERE id = :id AND user_id = :caller
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, List

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from postboard.database import Base
from postboard.models.tag import Tag, post_tags

if TYPE_CHECKING:
    from postboard.models.category import Category
    from postboard.models.user import User


class Post(Base):
    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    category_id: Mapped[int] = mapped_column(
        ForeignKey("categories.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    # Relationships are always loaded explicitly (selectinload) by the
    # repository; lazy loading is not available on an AsyncSession
    user: Mapped["User"] = relationship(lazy="raise")
    category: Mapped["Category"] = relationship(lazy="raise")
    tags: Mapped[List[Tag]] = relationship(secondary=post_tags, lazy="raise")

    __table_args__ = (
        Index("idx_posts_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, title='{self.title}', user_id={self.user_id})>"
