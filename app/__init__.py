"""Users API: CRUD over a single MySQL users table."""

__version__ = "0.1.0"
