"""
Snippetbox — User SQLAlchemy Model
===================================

What:  ORM model representing the `users` table.
Who:   UserService checks whether an authenticated session still points at an
       existing row. Signup and login are placeholders, so nothing in the
       application writes to this table yet.
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from snippetbox.database import Base


class User(Base):
    """A registered account."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    # bcrypt hashes are always 60 characters
    hashed_password: Mapped[str] = mapped_column(String(60), nullable=False)

    created: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
