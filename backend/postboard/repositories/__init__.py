"""
Postboard Backend — Repositories Package
==========================================

What:  Data-access layer behind the BlogRepository interface.

Modules:
    - base.py:                   BlogRepository (abstract contract)
    - sqlalchemy_repository.py:  SqlAlchemyBlogRepository (AsyncSession)
"""

from postboard.repositories.base import BlogRepository
from postboard.repositories.sqlalchemy_repository import SqlAlchemyBlogRepository

__all__ = ["BlogRepository", "SqlAlchemyBlogRepository"]
