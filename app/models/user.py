# File: app/models/user.py

"""
User model.

Owns the inverse side of User 1-N Post and User 1-N Comment. Email
uniqueness is enforced by the named unique index idx_user_email rather
than a column-level constraint, so the planner reports that index by name.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base

if TYPE_CHECKING:
    from app.models.comment import Comment
    from app.models.post import Post


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        Index("idx_user_email", "email", unique=True),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.now,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.now,
        onupdate=datetime.now,
        nullable=False,
    )

    # Lazy by default: touching user.posts issues its own SELECT
    posts: Mapped[list[Post]] = relationship(back_populates="user", lazy="select")
    comments: Mapped[list[Comment]] = relationship(back_populates="user", lazy="select")

    def __repr__(self) -> str:
        return f"User(id={self.id!r}, name={self.name!r}, email={self.email!r})"
