# File: app/api/deps.py

from typing import List, Optional

from fastapi import Depends, Query
from sqlalchemy.orm import Session

from app.core.config import settings
from app.db.session import get_db
from app.repositories.pagination import PageRequest, Sort
from app.repositories.post import PostRepository

DEFAULT_POST_SORT = Sort.by("createdAt").descending()
# page index fits a signed 32-bit int
MAX_PAGE_INDEX = 2**31 - 1


def get_post_repository(db: Session = Depends(get_db)) -> PostRepository:
    """
    FastAPI dependency that provides a PostRepository bound to the request session.
    """
    return PostRepository(db)


def get_post_page_request(
    page: int = Query(0, ge=0, le=MAX_PAGE_INDEX, description="Zero-based page index"),
    size: int = Query(
        settings.default_page_size,
        ge=1,
        le=settings.max_page_size,
        description="Page size",
    ),
    sort: Optional[List[str]] = Query(
        None,
        description="Sort criteria in the form property(,asc|desc). Repeat for multiple.",
    ),
) -> PageRequest:
    """
    Build a PageRequest from ?page=&size=&sort= with the post listing defaults
    (size from settings, newest first).
    """
    parsed = Sort.parse(sort)
    return PageRequest.of(page, size, parsed if parsed.is_sorted else DEFAULT_POST_SORT)
