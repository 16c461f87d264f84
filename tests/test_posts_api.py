# File: tests/test_posts_api.py

"""
HTTP tests for /api/posts.

Fixture data: 3 users x 5 posts, 2 comments per post. Post IDs run
1..15 in user order and created_at grows with (user.id * 10 + j) days,
so User3's fifth post is the newest.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError

from app.main import create_application


@pytest.fixture(autouse=True)
def blog_data(seed):
    return seed(users=3, posts_per_user=5, comments_per_post=2)


def test_health_endpoint(client):
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


# -----------------------------
# GET /api/posts
# -----------------------------

def test_list_posts_defaults(client):
    resp = client.get("/api/posts")
    assert resp.status_code == 200
    data = resp.json()

    assert len(data["content"]) == 10
    assert data["totalElements"] == 15
    assert data["totalPages"] == 2
    assert data["number"] == 0
    assert data["size"] == 10
    assert data["numberOfElements"] == 10
    assert data["first"] is True
    assert data["last"] is False
    assert data["empty"] is False


def test_list_posts_newest_first_with_dto_fields(client):
    data = client.get("/api/posts").json()
    first = data["content"][0]

    assert first["title"] == "Post by User3 #5"
    assert first["authorName"] == "User3"
    assert first["commentCount"] == 2
    assert set(first) == {"id", "title", "content", "authorName", "createdAt", "commentCount"}

    created = [item["createdAt"] for item in data["content"]]
    assert created == sorted(created, reverse=True)


def test_list_posts_second_page_of_five(client):
    resp = client.get("/api/posts", params={"page": 1, "size": 5})
    assert resp.status_code == 200
    data = resp.json()

    assert len(data["content"]) == 5
    assert data["totalPages"] == 3
    assert data["number"] == 1
    assert data["first"] is False
    assert data["last"] is False


def test_list_posts_custom_sort(client):
    resp = client.get("/api/posts", params={"sort": "title,asc", "size": 3})
    assert resp.status_code == 200
    titles = [item["title"] for item in resp.json()["content"]]
    assert titles == ["Post by User1 #1", "Post by User1 #2", "Post by User1 #3"]


def test_list_posts_sorted_by_author_name(client):
    resp = client.get("/api/posts", params={"sort": ["user.name,desc", "id"], "size": 6})
    assert resp.status_code == 200
    content = resp.json()["content"]

    assert [item["authorName"] for item in content] == ["User3"] * 5 + ["User2"]
    assert content[0]["title"] == "Post by User3 #1"


def test_list_posts_cannot_sort_by_collection(client):
    resp = client.get("/api/posts", params={"sort": "comments.id"})
    assert resp.status_code == 400


def test_list_posts_page_past_the_end_is_empty(client):
    data = client.get("/api/posts", params={"page": 9}).json()
    assert data["content"] == []
    assert data["totalElements"] == 15
    assert data["empty"] is True


def test_list_posts_unknown_sort_property_is_rejected(client):
    resp = client.get("/api/posts", params={"sort": "popularity,desc"})
    assert resp.status_code == 400
    assert "popularity" in resp.json()["detail"]


@pytest.mark.parametrize("params", [{"size": 0}, {"page": -1}, {"size": 100000}, {"page": 10**18}, {"page": 2**31}])
def test_list_posts_invalid_paging_params(client, params):
    resp = client.get("/api/posts", params=params)
    assert resp.status_code == 422


def test_list_posts_query_count_is_constant(client, query_counter):
    with query_counter:
        resp = client.get("/api/posts")
    assert resp.status_code == 200

    # page with joined authors, comments IN (...), COUNT
    assert query_counter.count == 3
    assert len(query_counter.selects_on("comments")) == 1


# -----------------------------
# GET /api/posts/{id}
# -----------------------------

def test_get_post_detail_with_comments(client):
    resp = client.get("/api/posts/1")
    assert resp.status_code == 200
    data = resp.json()

    assert data["id"] == 1
    assert data["title"] == "Post by User1 #1"
    assert data["authorName"] == "User1"
    assert len(data["comments"]) == 2
    assert [c["content"] for c in data["comments"]] == ["Comment 1", "Comment 2"]
    assert [c["authorName"] for c in data["comments"]] == ["User2", "User3"]


def test_get_post_detail_is_one_query(client, query_counter):
    with query_counter:
        resp = client.get("/api/posts/3")
    assert resp.status_code == 200
    assert query_counter.count == 1


def test_get_post_not_found(client):
    resp = client.get("/api/posts/99999")
    assert resp.status_code == 404


# -----------------------------
# GET /api/posts/users/{user_id}
# -----------------------------

def test_list_user_posts(client):
    resp = client.get("/api/posts/users/1")
    assert resp.status_code == 200
    data = resp.json()

    assert len(data["content"]) == 5
    assert data["totalElements"] == 5
    assert data["totalPages"] == 1
    assert data["content"][0]["title"] == "Post by User1 #5"
    assert {item["authorName"] for item in data["content"]} == {"User1"}


def test_list_user_posts_paged(client):
    data = client.get("/api/posts/users/1", params={"size": 3}).json()
    assert len(data["content"]) == 3
    assert data["totalPages"] == 2
    assert data["last"] is False


def test_list_posts_of_unknown_user_is_empty_page(client):
    resp = client.get("/api/posts/users/999")
    assert resp.status_code == 200
    data = resp.json()
    assert data["content"] == []
    assert data["totalElements"] == 0
    assert data["totalPages"] == 0
    assert data["empty"] is True


# -----------------------------
# Error translation
# -----------------------------

def test_integrity_error_becomes_conflict():
    app = create_application()

    @app.get("/boom")
    def boom():
        raise IntegrityError("INSERT INTO users ...", {}, Exception("UNIQUE constraint failed: users.email"))

    resp = TestClient(app).get("/boom")
    assert resp.status_code == 409
    assert "detail" in resp.json()
