# File: app/models/base.py

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    User, Post and Comment inherit from this so that a single
    Base.metadata.create_all() builds the whole schema with its indexes.
    """
    pass
