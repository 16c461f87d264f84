"""Post repository.

Groups the finders by how they load ``post.user`` and ``post.comments``:

- plain finders leave both relationships lazy, so touching them per row
  issues one SELECT per post (the N+1 pattern);
- ``*_with_user*`` finders are fetch joins: the relationship rows come back
  in the same statement through an INNER JOIN (user) or LEFT OUTER JOIN
  (comments);
- ``*_order_by_*`` finders declare their loaded relationships once per
  method and always use LEFT OUTER JOIN;
- ``*_batched`` finders keep the main query join-free and load each
  relationship with one extra ``WHERE id IN (...)`` query.
"""

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload, selectinload

from app.models.comment import Comment
from app.models.post import Post
from app.repositories.base import GenericRepository
from app.repositories.pagination import Page, PageRequest, Slice


def _fetch_user():
    return joinedload(Post.user, innerjoin=True)


def _listing_options() -> tuple:
    # user through the join, comments batched with IN (...) for commentCount
    return (_fetch_user(), selectinload(Post.comments))


class PostRepository(GenericRepository[Post]):
    """Repository for Post entities."""

    def __init__(self, session: Session):
        super().__init__(session, Post)

    # ------------------------------------------------------------------
    # by-field finders (idx_post_user_created / idx_post_created_at)
    # ------------------------------------------------------------------

    def find_by_user_id(self, user_id: int) -> list[Post]:
        """Posts of one user, newest first. Served by idx_post_user_created."""
        stmt = select(Post).where(Post.user_id == user_id).order_by(Post.created_at.desc())
        return self._list(stmt)

    def find_page_by_user_id(self, user_id: int, pageable: PageRequest, eager: bool = False) -> Page[Post]:
        """One page of a user's posts.

        Args:
            user_id: Author ID. An unknown ID yields an empty page.
            pageable: Page index, size and sort.
            eager: Fetch ``user`` in the page query and batch-load ``comments``.

        Returns:
            The requested page.
        """
        stmt = select(Post).where(Post.user_id == user_id)
        return self._page(stmt, pageable, _listing_options() if eager else ())

    def find_by_created_at_between(self, start: datetime, end: datetime) -> list[Post]:
        """Posts created within ``[start, end]``. Served by idx_post_created_at."""
        stmt = select(Post).where(Post.created_at.between(start, end)).order_by(Post.created_at)
        return self._list(stmt)

    def find_page_by_created_at_between(
        self,
        start: datetime,
        end: datetime,
        pageable: PageRequest,
    ) -> Page[Post]:
        """One page of posts created within ``[start, end]``."""
        stmt = select(Post).where(Post.created_at.between(start, end))
        return self._page(stmt, pageable)

    # ------------------------------------------------------------------
    # fetch joins
    # ------------------------------------------------------------------

    def find_all_with_user(self) -> list[Post]:
        """All posts with their author, in a single INNER JOIN query."""
        stmt = select(Post).options(_fetch_user()).order_by(Post.id)
        return self._list(stmt)

    def find_page_with_user(self, pageable: PageRequest, load_comments: bool = False) -> Page[Post]:
        """One page of posts with their author joined in.

        The COUNT query runs against ``posts`` alone, without the join.

        Args:
            pageable: Page index, size and sort.
            load_comments: Also batch-load ``comments`` with one IN query so
                callers can read ``len(post.comments)`` without extra queries.

        Returns:
            The requested page.
        """
        options = _listing_options() if load_comments else (_fetch_user(),)
        return self._page(select(Post), pageable, options)

    def find_all_with_user_and_comments(self) -> list[Post]:
        """All posts with author and comments in one statement.

        The comments join multiplies rows; results are de-duplicated per post.
        """
        stmt = (
            select(Post)
            .options(_fetch_user(), joinedload(Post.comments))
            .order_by(Post.id)
        )
        return self._list(stmt)

    def find_by_id_with_user_and_comments(self, post_id: int) -> Post | None:
        """One post with author and comments in one statement, or None."""
        stmt = (
            select(Post)
            .where(Post.id == post_id)
            .options(_fetch_user(), joinedload(Post.comments).joinedload(Comment.user))
        )
        return self.session.execute(stmt).unique().scalar_one_or_none()

    # ------------------------------------------------------------------
    # declared load plans (LEFT OUTER JOIN)
    # ------------------------------------------------------------------

    def find_all_order_by_created_at_desc(self) -> list[Post]:
        """All posts, newest first, with ``user`` loaded through a LEFT OUTER JOIN."""
        stmt = select(Post).options(joinedload(Post.user)).order_by(Post.created_at.desc())
        return self._list(stmt)

    def find_with_user_and_comments_by_id(self, post_id: int) -> Post | None:
        """One post with ``user`` and ``comments`` loaded through LEFT OUTER JOINs."""
        stmt = (
            select(Post)
            .where(Post.id == post_id)
            .options(joinedload(Post.user), joinedload(Post.comments))
        )
        return self.session.execute(stmt).unique().scalar_one_or_none()

    def find_page_order_by_id_desc(self, pageable: PageRequest) -> Page[Post]:
        """One page of posts by descending ID with ``user`` loaded (LEFT OUTER JOIN).

        Any sort carried by ``pageable`` is applied after ``id DESC``.
        """
        stmt = select(Post).order_by(Post.id.desc())
        return self._page(stmt, pageable, (joinedload(Post.user),))

    # ------------------------------------------------------------------
    # batch loading (IN clause)
    # ------------------------------------------------------------------

    def find_all_batched(self) -> list[Post]:
        """All posts; ``user`` and ``comments`` each loaded with one IN query.

        Three statements in total regardless of the number of posts.
        """
        stmt = (
            select(Post)
            .options(selectinload(Post.user), selectinload(Post.comments))
            .order_by(Post.id)
        )
        return self._list(stmt)

    def find_page_batched(self, pageable: PageRequest) -> Page[Post]:
        """One page of posts with ``user`` and ``comments`` batch-loaded.

        Unlike a collection fetch join, the LIMIT applies to ``posts`` rows
        directly, and the IN queries only cover the posts on this page.
        """
        options = (selectinload(Post.user), selectinload(Post.comments))
        return self._page(select(Post), pageable, options)

    # ------------------------------------------------------------------
    # slices
    # ------------------------------------------------------------------

    def find_slice(self, pageable: PageRequest) -> Slice[Post]:
        """One window of posts without a COUNT query."""
        return self._slice(select(Post), pageable)
