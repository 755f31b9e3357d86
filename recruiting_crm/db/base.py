"""
SQLAlchemy declarative base.

All models inherit from this Base class so that metadata
(and therefore Alembic autogenerate) sees every table.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass
