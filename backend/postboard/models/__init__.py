"""
Postboard Backend — ORM Models Package
========================================

Importing this package registers every table with `Base.metadata`, which
relationship resolution, Alembic autogenerate and the SQLite test fixtures
all rely on.
"""

from postboard.models.user import User
from postboard.models.category import Category
from postboard.models.tag import Tag, post_tags
from postboard.models.post import Post
from postboard.models.comment import Comment

__all__ = ["User", "Category", "Tag", "post_tags", "Post", "Comment"]
