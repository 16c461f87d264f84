# File: app/schemas/post.py

from datetime import datetime
from typing import Generic, List, TypeVar

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from app.models.comment import Comment
from app.models.post import Post
from app.repositories.pagination import Page

T = TypeVar("T")


class CamelModel(BaseModel):
    """Serializes snake_case fields as camelCase JSON keys."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


# -----------------------------
# Comment projections
# -----------------------------

class CommentResponse(CamelModel):
    id: int
    content: str
    author_name: str
    created_at: datetime

    @classmethod
    def from_entity(cls, comment: Comment) -> "CommentResponse":
        return cls(
            id=comment.id,
            content=comment.content,
            author_name=comment.user.name,
            created_at=comment.created_at,
        )


# -----------------------------
# Post projections
# -----------------------------

class PostResponse(CamelModel):
    id: int
    title: str
    content: str
    author_name: str
    created_at: datetime
    comment_count: int

    @classmethod
    def from_entity(cls, post: Post) -> "PostResponse":
        # Reads post.user and post.comments; load both up front for lists
        return cls(
            id=post.id,
            title=post.title,
            content=post.content,
            author_name=post.user.name,
            created_at=post.created_at,
            comment_count=len(post.comments),
        )


class PostDetailResponse(CamelModel):
    id: int
    title: str
    content: str
    author_name: str
    created_at: datetime
    comments: List[CommentResponse] = []

    @classmethod
    def from_entity(cls, post: Post) -> "PostDetailResponse":
        return cls(
            id=post.id,
            title=post.title,
            content=post.content,
            author_name=post.user.name,
            created_at=post.created_at,
            comments=[CommentResponse.from_entity(c) for c in post.comments],
        )


# -----------------------------
# Page envelope
# -----------------------------

class PageResponse(CamelModel, Generic[T]):
    content: List[T]
    total_elements: int
    total_pages: int
    number: int
    size: int
    number_of_elements: int
    first: bool
    last: bool
    empty: bool

    @classmethod
    def from_page(cls, page: Page[T]) -> "PageResponse[T]":
        return cls(
            content=page.content,
            total_elements=page.total_elements,
            total_pages=page.total_pages,
            number=page.number,
            size=page.size,
            number_of_elements=page.number_of_elements,
            first=page.is_first,
            last=page.is_last,
            empty=page.is_empty,
        )
