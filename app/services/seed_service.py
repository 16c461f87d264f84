# File: app/services/seed_service.py

"""
Fixture data for the blog schema.

Default output is fully deterministic so query counts and plans can be
asserted against it:

  users     User1..UserN, user{i}@test.com
  posts     "Post by User{i} #{j}", created_at = base_date + (user.id * 10 + j) days
  comments  "Comment {k}", authored by users[k % N]

With ``realistic=True`` names, titles and bodies come from Faker instead;
row counts, timestamps and foreign keys stay the same.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from faker import Faker

from app.core.logger import get_logger
from app.models.comment import Comment
from app.models.post import Post
from app.models.user import User
from app.repositories.base import UnitOfWork

logger = get_logger(__name__)

DEFAULT_BASE_DATE = datetime(2026, 1, 1)
FLUSH_EVERY = 500


@dataclass(frozen=True)
class SeedResult:
    users: int
    posts: int
    comments: int


def _post_created_at(base_date: datetime, user_id: int, j: int) -> datetime:
    return base_date + timedelta(days=user_id * 10 + j)


def seed_blog(
    uow: UnitOfWork,
    users: int = 3,
    posts_per_user: int = 5,
    comments_per_post: int = 2,
    base_date: datetime = DEFAULT_BASE_DATE,
    realistic: bool = False,
    faker_seed: Optional[int] = None,
) -> SeedResult:
    """
    Insert users, their posts and the posts' comments inside ``uow``.

    Rows are flushed in chunks so IDs are available for the timestamp
    formula; committing is left to the caller.

    Args:
        uow: An entered UnitOfWork.
        users: Number of users to create.
        posts_per_user: Posts written by each user.
        comments_per_post: Comments attached to each post.
        base_date: Origin for post timestamps.
        realistic: Generate text with Faker instead of the fixed patterns.
        faker_seed: Seed for Faker, for reproducible realistic data.

    Returns:
        SeedResult with the number of rows created per table.
    """
    if users < 1:
        raise ValueError("users must be at least 1")
    if posts_per_user < 0 or comments_per_post < 0:
        raise ValueError("posts_per_user and comments_per_post must not be negative")

    fake = Faker()
    if faker_seed is not None:
        fake.seed_instance(faker_seed)

    # ---------- users ----------
    created_users = []
    for i in range(1, users + 1):
        if realistic:
            user = User(name=fake.name()[:50], email=fake.unique.email())
        else:
            user = User(name=f"User{i}", email=f"user{i}@test.com")
        created_users.append(user)
    uow.users.add_all(created_users)
    uow.flush()
    logger.info("Seeded %d users", len(created_users))

    # ---------- posts ----------
    created_posts = []
    for user in created_users:
        for j in range(1, posts_per_user + 1):
            if realistic:
                title, content = fake.sentence(nb_words=8)[:200], fake.text(max_nb_chars=1000)
            else:
                title, content = f"Post by {user.name} #{j}", f"Content {j} by {user.name}"
            post = Post(
                title=title,
                content=content,
                user=user,
                created_at=_post_created_at(base_date, user.id, j),
            )
            created_posts.append(post)
            uow.posts.add(post)
            if len(created_posts) % FLUSH_EVERY == 0:
                uow.flush()
    uow.flush()
    logger.info("Seeded %d posts", len(created_posts))

    # ---------- comments ----------
    comment_count = 0
    for post in created_posts:
        for k in range(1, comments_per_post + 1):
            content = fake.text(max_nb_chars=300) if realistic else f"Comment {k}"
            uow.comments.add(
                Comment(
                    content=content,
                    post=post,
                    user=created_users[k % len(created_users)],
                )
            )
            comment_count += 1
            if comment_count % FLUSH_EVERY == 0:
                uow.flush()
    uow.flush()
    logger.info("Seeded %d comments", comment_count)

    return SeedResult(users=len(created_users), posts=len(created_posts), comments=comment_count)
