"""User model. Rows are owned by the account system; this service only reads them."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from postboard.database import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, name='{self.first_name} {self.last_name}')>"
