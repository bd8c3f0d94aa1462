"""Core app configuration and database."""

from app.core.config import get_settings, load_database_settings
from app.core.database import get_db

__all__ = ["get_settings", "load_database_settings", "get_db"]
