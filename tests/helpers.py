"""Shared test fixtures: an in-memory SQLite engine standing in for MySQL."""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from app.models import Base


def make_engine() -> Engine:
    """Return a single-connection in-memory engine with the users table created."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine
