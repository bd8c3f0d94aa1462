"""
Create the users table if it does not exist. Run once per database:
  python -m app.scripts.init_db

This is a bootstrap only; it never alters an existing table.
"""
import logging
import sys

from sqlalchemy.exc import SQLAlchemyError

from app.core.config import get_settings
from app.core.database import DatabaseConnectionError, connect
from app.models import Base

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main() -> int:
    """Create missing tables for every model registered on Base."""
    try:
        engine = connect(get_settings())
    except DatabaseConnectionError as e:
        logger.error("%s", e.message)
        return 1
    try:
        Base.metadata.create_all(engine)
        logger.info("Tables ready: %s", ", ".join(sorted(Base.metadata.tables)))
        return 0
    except SQLAlchemyError as e:
        logger.exception("Table creation failed: %s", e)
        return 1
    finally:
        engine.dispose()


if __name__ == "__main__":
    sys.exit(main())
