"""ORM model for the users table."""

from sqlalchemy import Column, Integer, String

from app.models.base import Base


class User(Base):
    """
    A stored user. id is assigned by the database on insert and never changes.

    age is optional and round-trips through the API unchanged.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    age = Column(Integer, nullable=True)
