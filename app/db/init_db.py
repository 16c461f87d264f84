"""
Database initialization helpers.

Importing ``app.models`` registers users, posts and comments (with their
indexes) on Base.metadata before create_all runs.
"""

from typing import Optional

from sqlalchemy import Engine

from app.core.logger import get_logger
from app.db.session import engine as default_engine
from app.models import Base

logger = get_logger(__name__)


def init_db(bind: Optional[Engine] = None) -> None:
    """
    Create all tables and indexes that do not exist yet.
    """
    bind = bind or default_engine
    Base.metadata.create_all(bind=bind)
    logger.info("Schema ready on %s (%s)", bind.url.render_as_string(hide_password=True), ", ".join(Base.metadata.tables))


def drop_db(bind: Optional[Engine] = None) -> None:
    """
    Drop every table known to the models, children first.
    """
    bind = bind or default_engine
    Base.metadata.drop_all(bind=bind)
    logger.warning("Dropped all tables on %s", bind.url.render_as_string(hide_password=True))
