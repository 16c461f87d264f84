# File: app/models/post.py

"""
Post model.

Two secondary indexes back the read paths of the API:
  - idx_post_created_at      (created_at)           range scans and "latest first"
  - idx_post_user_created    (user_id, created_at)  per-user listings
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base

if TYPE_CHECKING:
    from app.models.comment import Comment
    from app.models.user import User


class Post(Base):
    __tablename__ = "posts"
    __table_args__ = (
        Index("idx_post_created_at", "created_at"),
        Index("idx_post_user_created", "user_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.now,
        nullable=False,
    )

    user: Mapped[User] = relationship(back_populates="posts", lazy="select")
    comments: Mapped[list[Comment]] = relationship(
        back_populates="post",
        lazy="select",
        order_by="Comment.id",
    )

    def __repr__(self) -> str:
        return f"Post(id={self.id!r}, title={self.title!r}, user_id={self.user_id!r})"
