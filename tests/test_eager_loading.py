# File: tests/test_eager_loading.py

"""
Declared load plans (LEFT OUTER JOIN) and batch loading (IN clause).

Fixture data: 10 users x 3 posts, 2 comments per post (30 posts).
"""

import pytest

from app.repositories.pagination import PageRequest, Sort
from app.repositories.post import PostRepository
from app.services.query_report import compare_loading_strategies


@pytest.fixture(autouse=True)
def blog_data(seed):
    return seed(users=10, posts_per_user=3, comments_per_post=2)


@pytest.fixture
def posts(db_session):
    return PostRepository(db_session)


# -----------------------------
# declared graphs
# -----------------------------

def test_order_by_created_at_desc_loads_user_with_outer_join(posts, query_counter):
    with query_counter:
        result = posts.find_all_order_by_created_at_desc()
        names = [p.user.name for p in result]

    assert len(result) == 30
    assert names[0] == "User10"
    assert query_counter.count == 1
    assert "LEFT OUTER JOIN users" in query_counter.statements[0]


def test_order_by_created_at_desc_leaves_comments_lazy(posts, query_counter):
    result = posts.find_all_order_by_created_at_desc()
    with query_counter:
        _ = len(result[0].comments)
    assert query_counter.count == 1


def test_with_user_and_comments_by_id(posts, query_counter):
    with query_counter:
        post = posts.find_with_user_and_comments_by_id(4)
        assert post.user.name == "User2"
        assert len(post.comments) == 2

    assert query_counter.count == 1
    assert query_counter.statements[0].count("LEFT OUTER JOIN") == 2


def test_page_order_by_id_desc(posts, query_counter):
    with query_counter:
        page = posts.find_page_order_by_id_desc(PageRequest.of(0, 5))
        names = [p.user.name for p in page.content]

    assert [p.id for p in page.content] == [30, 29, 28, 27, 26]
    assert names == ["User10"] * 3 + ["User9"] * 2
    assert page.total_elements == 30
    # page + COUNT
    assert query_counter.count == 2


# -----------------------------
# batch loading
# -----------------------------

def test_find_all_batched_uses_three_statements(posts, query_counter):
    with query_counter:
        result = posts.find_all_batched()
        names = {p.user.name for p in result}
        counts = [len(p.comments) for p in result]

    assert len(names) == 10
    assert counts == [2] * 30
    # posts, users IN (...), comments IN (...)
    assert query_counter.count == 3
    assert " IN (" in query_counter.selects_on("users")[0]
    assert " IN (" in query_counter.selects_on("comments")[0]


def test_find_page_batched_only_loads_rows_of_the_page(posts, query_counter):
    with query_counter:
        page = posts.find_page_batched(PageRequest.of(1, 4, Sort.by("id")))
        _ = [(p.user.name, len(p.comments)) for p in page.content]

    assert [p.id for p in page.content] == [5, 6, 7, 8]
    assert page.total_elements == 30
    assert page.total_pages == 8
    assert query_counter.count == 4


def test_page_with_user_without_comments(posts, query_counter):
    with query_counter:
        page = posts.find_page_with_user(PageRequest.of(0, 10))
        _ = [p.user.name for p in page.content]

    assert page.number_of_elements == 10
    assert query_counter.count == 2


# -----------------------------
# side by side
# -----------------------------

def test_compare_loading_strategies(session_factory, db_engine):
    results = {r.name: r for r in compare_loading_strategies(session_factory, db_engine)}

    assert {r.posts for r in results.values()} == {30}
    assert results["lazy"].statements == 1 + 10 + 30
    assert results["fetch join"].statements == 1
    assert results["declared graph (user only)"].statements == 1 + 30
    assert results["batch (IN)"].statements == 3
