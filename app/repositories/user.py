"""User repository."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.user import User
from app.repositories.base import GenericRepository


class UserRepository(GenericRepository[User]):
    """Repository for User entities."""

    def __init__(self, session: Session):
        super().__init__(session, User)

    def find_by_email(self, email: str) -> User | None:
        """Retrieve a user by email through the unique index idx_user_email.

        Args:
            email: Exact email address.

        Returns:
            The user if found, None otherwise.
        """
        stmt = select(User).where(User.email == email)
        return self.session.execute(stmt).scalar_one_or_none()
