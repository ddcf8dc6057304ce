"""
SQLAlchemy declarative base.

Every model inherits from Base so Alembic and create_all() see its table.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base class for all ORM models."""
