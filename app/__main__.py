"""
Run the HTTP server:

  python -m app

Listens on HOST:PORT (default 0.0.0.0:8080). Exits with status 1 if the
database cannot be reached or the listener fails.
"""

import logging
import sys

import uvicorn
from pydantic import ValidationError

from app.core.config import get_settings
from app.core.database import DatabaseConnectionError, connect
from app.main import create_app

logger = logging.getLogger(__name__)


def main() -> int:
    """Connect to the database, then serve until interrupted."""
    try:
        settings = get_settings()
    except ValidationError as e:
        logging.basicConfig(level=logging.INFO)
        logger.error("Invalid configuration: %s", e)
        return 1

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )

    try:
        engine = connect(settings)
    except (DatabaseConnectionError, ValidationError, ValueError) as e:
        logger.exception("Database startup failed: %s", e)
        return 1

    try:
        uvicorn.run(
            create_app(engine=engine),
            host=settings.HOST,
            port=int(settings.PORT),
            log_level=settings.LOG_LEVEL.lower(),
        )
    except SystemExit as e:
        # uvicorn exits this way when it cannot bind or start serving.
        if e.code:
            logger.error("HTTP listener failed: uvicorn exited with status %s", e.code)
            return 1
    except Exception as e:
        logger.exception("HTTP listener failed: %s", e)
        return 1
    finally:
        engine.dispose()
    return 0


if __name__ == "__main__":
    sys.exit(main())
