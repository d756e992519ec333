"""Utility script to prepare the database and the administrator credentials."""

from __future__ import annotations

import argparse
from getpass import getpass

from sqlalchemy.exc import SQLAlchemyError

from app.application.use_cases.notifications import NotificationDispatcher, factory
from app.domain.exceptions import NotificationPersistenceError
from app.infrastructure.database import SessionLocal, initialize_database
from app.infrastructure.security import get_password_hash


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Create the tables and print the ADMIN_PASSWORD_HASH setting.",
    )
    parser.add_argument(
        "--password",
        default=None,
        help="Administrator password. Prompted for when omitted.",
    )
    parser.add_argument(
        "--no-welcome",
        action="store_true",
        help="Do not store the initial system notification.",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()

    password = args.password or getpass("Administrator password: ")
    if not password:
        raise SystemExit("A password is required.")

    try:
        initialize_database()
    except SQLAlchemyError as exc:
        raise SystemExit(f"Could not initialize the database: {exc}") from exc

    if not args.no_welcome:
        session = SessionLocal()
        try:
            NotificationDispatcher(session).dispatch(
                factory.system_update("Admin dashboard initialized")
            )
        except NotificationPersistenceError as exc:
            raise SystemExit(f"Could not store the welcome notification: {exc}") from exc
        finally:
            session.close()

    print("Add this line to your .env file:")
    print(f"ADMIN_PASSWORD_HASH='{get_password_hash(password)}'")


if __name__ == "__main__":
    main()
