# File: tests/test_seed_service.py

from datetime import datetime, timedelta

import pytest

from app.repositories.base import UnitOfWork
from app.services.seed_service import DEFAULT_BASE_DATE, SeedResult, seed_blog


def test_seed_counts(seed, session_factory):
    result = seed(users=4, posts_per_user=3, comments_per_post=2)

    assert result == SeedResult(users=4, posts=12, comments=24)
    with UnitOfWork(session_factory) as uow:
        assert uow.users.count() == 4
        assert uow.posts.count() == 12
        assert uow.comments.count() == 24


def test_seed_is_deterministic(seed, session_factory):
    seed(users=2, posts_per_user=2, comments_per_post=1)

    with UnitOfWork(session_factory) as uow:
        user = uow.users.find_by_email("user2@test.com")
        titles = [p.title for p in uow.posts.find_by_user_id(user.id)]

    assert user.name == "User2"
    assert titles == ["Post by User2 #2", "Post by User2 #1"]


def test_seed_post_timestamps(seed, session_factory):
    seed(users=2, posts_per_user=3, comments_per_post=0)

    with UnitOfWork(session_factory) as uow:
        posts = uow.posts.find_by_user_id(2)

    expected = [DEFAULT_BASE_DATE + timedelta(days=2 * 10 + j) for j in (3, 2, 1)]
    assert [p.created_at for p in posts] == expected


def test_seed_custom_base_date(seed, session_factory):
    base = datetime(2030, 6, 1)
    seed(users=1, posts_per_user=1, comments_per_post=0, base_date=base)

    with UnitOfWork(session_factory) as uow:
        post = uow.posts.find_by_user_id(1)[0]

    assert post.created_at == base + timedelta(days=11)


def test_seed_realistic_data(seed, session_factory):
    result = seed(users=5, posts_per_user=2, comments_per_post=1, realistic=True, faker_seed=42)

    assert result == SeedResult(users=5, posts=10, comments=10)
    with UnitOfWork(session_factory) as uow:
        users = uow.users.get_all()
        assert len({u.email for u in users}) == 5
        assert all(len(u.name) <= 50 for u in users)
        assert all(len(p.title) <= 200 for p in uow.posts.get_all())


def test_seed_rejects_bad_counts(session_factory):
    with UnitOfWork(session_factory) as uow:
        with pytest.raises(ValueError):
            seed_blog(uow, users=0)
        with pytest.raises(ValueError):
            seed_blog(uow, users=1, posts_per_user=-1)
