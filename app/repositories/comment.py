"""Comment repository."""

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from app.models.comment import Comment
from app.repositories.base import GenericRepository


class CommentRepository(GenericRepository[Comment]):
    """Repository for Comment entities."""

    def __init__(self, session: Session):
        super().__init__(session, Comment)

    def find_by_post_id(self, post_id: int) -> list[Comment]:
        """Comments of one post. ``comment.user`` stays lazy."""
        stmt = select(Comment).where(Comment.post_id == post_id).order_by(Comment.id)
        return self._list(stmt)

    def find_by_user_id(self, user_id: int) -> list[Comment]:
        """Comments written by one user."""
        stmt = select(Comment).where(Comment.user_id == user_id).order_by(Comment.id)
        return self._list(stmt)

    def find_by_post_id_with_user(self, post_id: int) -> list[Comment]:
        """Comments of one post with their authors fetched in the same query.

        Args:
            post_id: The post ID.

        Returns:
            Comments whose ``user`` is already loaded (INNER JOIN users).
        """
        stmt = (
            select(Comment)
            .where(Comment.post_id == post_id)
            .options(joinedload(Comment.user, innerjoin=True))
            .order_by(Comment.id)
        )
        return self._list(stmt)
