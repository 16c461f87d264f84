# File: app/services/query_report.py

"""
Canned measurements over a seeded blog database.

- ``INDEX_PROBES``: the lookups each index exists for, as raw SQL, so their
  plans can be printed or asserted.
- ``compare_loading_strategies``: reads every post with its author and
  comment count under each load plan and records the statement count.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker

from app.core.logger import get_logger
from app.db.inspection import QueryCounter, explain, is_full_scan, uses_index
from app.models.post import Post
from app.repositories.base import UnitOfWork
from app.repositories.post import PostRepository

logger = get_logger(__name__)


@dataclass(frozen=True)
class IndexProbe:
    description: str
    sql: str
    params: Dict[str, Any]
    expected_index: Optional[str]


@dataclass(frozen=True)
class ProbeResult:
    probe: IndexProbe
    plan: List[str]
    used_index: bool
    full_scan: bool


@dataclass(frozen=True)
class StrategyResult:
    name: str
    posts: int
    statements: int
    elapsed_ms: float


INDEX_PROBES: List[IndexProbe] = [
    IndexProbe(
        "user by email",
        "SELECT * FROM users WHERE email = :email",
        {"email": "user50@test.com"},
        "idx_user_email",
    ),
    IndexProbe(
        "posts created in January 2026",
        "SELECT * FROM posts WHERE created_at BETWEEN :start AND :end",
        {"start": "2026-01-01 00:00:00", "end": "2026-01-31 23:59:59"},
        "idx_post_created_at",
    ),
    IndexProbe(
        "posts of one user",
        "SELECT * FROM posts WHERE user_id = :user_id",
        {"user_id": 1},
        "idx_post_user_created",
    ),
    IndexProbe(
        "posts of one user, newest first",
        "SELECT * FROM posts WHERE user_id = :user_id ORDER BY created_at DESC",
        {"user_id": 1},
        "idx_post_user_created",
    ),
    IndexProbe(
        "posts of one user in a date range",
        "SELECT * FROM posts WHERE user_id = :user_id AND created_at BETWEEN :start AND :end",
        {"user_id": 1, "start": "2026-01-01 00:00:00", "end": "2026-03-01 00:00:00"},
        "idx_post_user_created",
    ),
    IndexProbe(
        "posts by title (no index)",
        "SELECT * FROM posts WHERE title = :title",
        {"title": "Post by User1 #1"},
        None,
    ),
]


def run_index_probes(session: Session, probes: Optional[List[IndexProbe]] = None) -> List[ProbeResult]:
    results = []
    for probe in probes or INDEX_PROBES:
        plan = explain(session, probe.sql, probe.params)
        results.append(
            ProbeResult(
                probe=probe,
                plan=plan,
                used_index=uses_index(plan, probe.expected_index) if probe.expected_index else uses_index(plan),
                full_scan=is_full_scan(plan),
            )
        )
    return results


def _touch(posts: List[Post]) -> None:
    # what a PostResponse projection reads
    for post in posts:
        _ = post.user.name
        _ = len(post.comments)


LOAD_STRATEGIES: Dict[str, Callable[[PostRepository], List[Post]]] = {
    "lazy": lambda repo: repo.get_all(),
    "fetch join": lambda repo: repo.find_all_with_user_and_comments(),
    "declared graph (user only)": lambda repo: repo.find_all_order_by_created_at_desc(),
    "batch (IN)": lambda repo: repo.find_all_batched(),
}


def compare_loading_strategies(
    session_factory: sessionmaker[Session],
    engine: Engine,
) -> List[StrategyResult]:
    """
    Load all posts with author and comments under every strategy in
    ``LOAD_STRATEGIES``, each in a fresh session, counting statements.
    """
    results = []
    for name, load in LOAD_STRATEGIES.items():
        with UnitOfWork(session_factory) as uow, QueryCounter(engine) as counter:
            posts = load(uow.posts)
            _touch(posts)
        result = StrategyResult(name, len(posts), counter.count, counter.elapsed_ms)
        logger.info("%-28s %5d posts %6d statements %8.1f ms", name, result.posts, result.statements, result.elapsed_ms)
        results.append(result)
    return results
