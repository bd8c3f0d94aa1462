"""
Insert a user directly (e.g. seed data). Run from project root:
  python -m app.scripts.create_user NAME [--age N]
Example:
  python -m app.scripts.create_user Alice --age 30
"""
import argparse
import logging
import sys

from app.core.config import get_settings
from app.core.database import DatabaseConnectionError, connect, create_session_factory
from app.schemas.user import UserPayload
from app.services.users import UserStoreError, create_user


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a user without going through the HTTP API.")
    parser.add_argument("name", help="Name (1-255 chars)")
    parser.add_argument("--age", type=int, default=None, help="Optional age")
    args = parser.parse_args(argv)

    name = args.name.strip()
    if not name or len(name) > 255:
        print("Invalid name length.", file=sys.stderr)
        return 1

    logging.basicConfig(level=logging.WARNING)
    try:
        engine = connect(get_settings())
    except DatabaseConnectionError as e:
        print(e.message, file=sys.stderr)
        return 1

    db = create_session_factory(engine)()
    try:
        user = create_user(db, UserPayload(name=name, age=args.age))
        print(f"Created user '{user.name}' with id {user.id}.")
        return 0
    except UserStoreError as e:
        print(f"Could not create user: {e.message}", file=sys.stderr)
        return 1
    finally:
        db.close()
        engine.dispose()


if __name__ == "__main__":
    sys.exit(main())
