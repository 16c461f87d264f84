# File: app/db/session.py

from collections.abc import Generator

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import sessionmaker, Session

from app.core.config import settings

SQLALCHEMY_DATABASE_URL = settings.database_url


def enable_sqlite_foreign_keys(engine: Engine) -> None:
    """
    SQLite ships with foreign key enforcement switched off.

    Turning it on per connection makes orphan inserts and parent deletes
    fail the same way they do on PostgreSQL.
    """

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def build_engine(url: str, echo: bool = False, **kwargs) -> Engine:
    is_sqlite = url.startswith("sqlite")
    if is_sqlite:
        kwargs.setdefault("connect_args", {"check_same_thread": False})

    engine = create_engine(url, echo=echo, **kwargs)

    if is_sqlite:
        enable_sqlite_foreign_keys(engine)
    return engine


# SQL_ECHO is routed through the sqlalchemy.engine logger (app.core.logger)
engine = build_engine(SQLALCHEMY_DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# ----------------------------------------------------
# DB Session Dependency
# ----------------------------------------------------
def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that provides a SQLAlchemy session.

    Usage in route functions:
        db: Session = Depends(get_db)
    """
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()
