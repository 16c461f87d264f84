"""Repository layer base classes.

Implements Generic Repository + Unit of Work on top of SQLAlchemy sessions.
Concrete repositories only add declarative finders; all CRUD lives here.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import Select, delete, func, select
from sqlalchemy.orm import Session, sessionmaker
from typing_extensions import Self

from app.core.exceptions import SessionNotSetError
from app.repositories.pagination import Page, PageRequest, Slice

T = TypeVar("T")


class GenericRepository(Generic[T]):
    """Generic repository implementing common CRUD operations.

    This base class provides reusable database operations that can be
    extended by specific repositories for custom finders.
    """

    def __init__(self, session: Session, model_cls: type[T]):
        """Initialize repository with a session and model class.

        Args:
            session: SQLAlchemy session for database operations.
            model_cls: The SQLAlchemy model class this repository manages.
        """
        self.session = session
        self.model_cls = model_cls

    def add(self, entity: T) -> T:
        """Add a new entity to the session.

        The INSERT is issued on the next flush or commit.

        Args:
            entity: The entity instance to add.

        Returns:
            The added entity.
        """
        self.session.add(entity)
        return entity

    def add_all(self, entities: list[T]) -> list[T]:
        """Add multiple entities to the session.

        Args:
            entities: List of entity instances to add.

        Returns:
            The added entities.
        """
        self.session.add_all(entities)
        return entities

    def get_by_id(self, _id: Any) -> T | None:
        """Retrieve an entity by its primary key.

        Args:
            _id: The primary key value.

        Returns:
            The entity if found, None otherwise.
        """
        return self.session.get(self.model_cls, _id)

    def get_all(self, limit: int | None = None, offset: int | None = None) -> list[T]:
        """Retrieve all entities of this type.

        Args:
            limit: Maximum number of results to return.
            offset: Number of results to skip.

        Returns:
            List of all entities.
        """
        stmt = select(self.model_cls)
        if offset:
            stmt = stmt.offset(offset)
        if limit:
            stmt = stmt.limit(limit)
        return list(self.session.execute(stmt).scalars().all())

    def find_page(self, pageable: PageRequest) -> Page[T]:
        """Retrieve one page of entities plus the total count.

        Issues two statements: the windowed SELECT and a COUNT over the table.

        Args:
            pageable: Page index, size and sort.

        Returns:
            The requested page.
        """
        return self._page(select(self.model_cls), pageable)

    def update(self, entity: T) -> T:
        """Merge a detached entity's state into the session.

        Args:
            entity: The entity instance to update.

        Returns:
            The persistent instance.
        """
        return self.session.merge(entity)

    def delete(self, entity: T) -> None:
        """Delete an entity from the database.

        There is no cascade: deleting a row that still has children fails
        with an IntegrityError when the session flushes.

        Args:
            entity: The entity instance to delete.
        """
        self.session.delete(entity)

    def delete_by_id(self, _id: Any) -> bool:
        """Delete an entity by its primary key.

        Args:
            _id: The primary key value.

        Returns:
            True if entity was deleted, False if not found.
        """
        entity = self.get_by_id(_id)
        if entity:
            self.delete(entity)
            return True
        return False

    def delete_all(self) -> int:
        """Delete every row of this table with a single bulk DELETE.

        Returns:
            Number of deleted rows.
        """
        result = self.session.execute(delete(self.model_cls))
        return result.rowcount

    def count(self) -> int:
        """Count total number of entities.

        Returns:
            Total count of entities.
        """
        return self.session.execute(select(func.count()).select_from(self.model_cls)).scalar_one()

    def exists(self, _id: Any) -> bool:
        """Check if an entity exists by its primary key.

        Args:
            _id: The primary key value.

        Returns:
            True if entity exists, False otherwise.
        """
        return self.get_by_id(_id) is not None

    # ------------------------------------------------------------------
    # helpers for subclasses
    # ------------------------------------------------------------------

    def _list(self, stmt: Select) -> list[T]:
        return list(self.session.execute(stmt).unique().scalars().all())

    def _count(self, stmt: Select) -> int:
        """COUNT(*) over ``stmt`` with its ORDER BY removed."""
        count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
        return self.session.execute(count_stmt).scalar_one()

    def _page(self, stmt: Select, pageable: PageRequest, options: tuple = ()) -> Page[T]:
        """Run ``stmt`` windowed by ``pageable`` plus a COUNT over ``stmt``.

        Args:
            stmt: Base statement without ORDER BY / LIMIT / loader options.
            pageable: Page index, size and sort.
            options: Loader options for the content query only; the COUNT
                query never carries them.

        Returns:
            The requested page.
        """
        content = self._list(pageable.apply(stmt.options(*options), self.model_cls))
        total = self._count(stmt)
        return Page(content=content, pageable=pageable, total_elements=total)

    def _slice(self, stmt: Select, pageable: PageRequest, options: tuple = ()) -> Slice[T]:
        rows = self._list(pageable.apply(stmt.options(*options), self.model_cls, extra_rows=1))
        return Slice.from_overfetch(rows, pageable)


class UnitOfWork:
    """Unit of Work pattern for managing database transactions.

    Groups repository operations on users, posts and comments into a
    single transaction. Repositories are created lazily per session.

    Example:
        >>> with UnitOfWork(SessionLocal) as uow:
        ...     user = uow.users.add(User(name="User1", email="user1@test.com"))
        ...     uow.commit()
    """

    def __init__(self, session_factory: sessionmaker[Session]):
        """Initialize Unit of Work with a session factory.

        Args:
            session_factory: SQLAlchemy sessionmaker instance.
        """
        self.session_factory = session_factory
        self.session: Session | None = None
        self._reset_repositories()

    def __enter__(self) -> Self:
        self.session = self.session_factory()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Close the session, rolling back first if an exception occurred."""
        if exc_type is not None:
            self.rollback()
        if self.session:
            self.session.close()
            self.session = None
        self._reset_repositories()

    def _reset_repositories(self) -> None:
        self._user_repo = None
        self._post_repo = None
        self._comment_repo = None

    def _get_repository(self, repo_attr: str, repo_class: type) -> Any:
        """Helper method for lazy repository initialization.

        Raises:
            SessionNotSetError: If session is not initialized.
        """
        if self.session is None:
            raise SessionNotSetError

        cached_repo = getattr(self, repo_attr, None)
        if cached_repo is not None:
            return cached_repo

        repo = repo_class(self.session)
        setattr(self, repo_attr, repo)
        return repo

    @property
    def users(self):
        from app.repositories.user import UserRepository

        return self._get_repository("_user_repo", UserRepository)

    @property
    def posts(self):
        from app.repositories.post import PostRepository

        return self._get_repository("_post_repo", PostRepository)

    @property
    def comments(self):
        from app.repositories.comment import CommentRepository

        return self._get_repository("_comment_repo", CommentRepository)

    def commit(self) -> None:
        """Commit the current transaction."""
        if self.session:
            self.session.commit()

    def rollback(self) -> None:
        """Rollback the current transaction."""
        if self.session:
            self.session.rollback()

    def flush(self) -> None:
        """Flush pending changes without committing."""
        if self.session:
            self.session.flush()
