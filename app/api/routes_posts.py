# File: app/api/routes_posts.py

"""
Post read endpoints.

Every handler is a thin pass-through: pick the repository finder with the
right load plan, then project entities into response DTOs.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.deps import get_post_page_request, get_post_repository
from app.repositories.pagination import PageRequest
from app.repositories.post import PostRepository
from app.schemas.post import PageResponse, PostDetailResponse, PostResponse

router = APIRouter()


@router.get(
    "",
    response_model=PageResponse[PostResponse],
    summary="List posts (paginated)",
)
def get_all_posts(
    pageable: PageRequest = Depends(get_post_page_request),
    posts: PostRepository = Depends(get_post_repository),
):
    """
    GET /api/posts?page=0&size=10&sort=createdAt,desc

    Authors come in through the page query's join and comment counts from a
    single IN query, so the page costs three statements including the COUNT.
    """
    page = posts.find_page_with_user(pageable, load_comments=True)
    return PageResponse[PostResponse].from_page(page.map(PostResponse.from_entity))


@router.get(
    "/{post_id}",
    response_model=PostDetailResponse,
    summary="Get a post with its comments",
)
def get_post_by_id(
    post_id: int,
    posts: PostRepository = Depends(get_post_repository),
):
    post = posts.find_by_id_with_user_and_comments(post_id)
    if post is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Post {post_id} not found",
        )
    return PostDetailResponse.from_entity(post)


@router.get(
    "/users/{user_id}",
    response_model=PageResponse[PostResponse],
    summary="List one user's posts (paginated)",
)
def get_posts_by_user_id(
    user_id: int,
    pageable: PageRequest = Depends(get_post_page_request),
    posts: PostRepository = Depends(get_post_repository),
):
    """
    GET /api/posts/users/{user_id}?page=0&size=10

    An unknown user is not an error; the page is simply empty.
    """
    page = posts.find_page_by_user_id(user_id, pageable, eager=True)
    return PageResponse[PostResponse].from_page(page.map(PostResponse.from_entity))
