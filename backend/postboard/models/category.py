"""
Postboard Backend — Category SQLAlchemy Model
===============================================

Clients reference categories by `name`, never by id, so the name carries a
unique constraint and doubles as the lookup key for listing and creation.
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from postboard.database import Base


class Category(Base):
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name='{self.name}')>"
