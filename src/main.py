"""Command-line entry point for creating admin accounts.

Admins are not created through the HTTP API. This interactive tool creates
one directly in the configured database, after which the admin can log in at
``POST /api/admin/login`` and issue access keys.
"""

import getpass
import logging
import sys
from typing import Optional

from core.database import SessionLocal, init_db
from utils.admin_manager import AdminAlreadyExistsError, AdminManager

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


def print_banner() -> None:
    """Print program banner and description."""
    print("=" * 70)
    print("  LIFF Group Tool - Admin Account Setup")
    print("=" * 70)
    print()
    print("Creates an admin who can manage channels and issue access keys.")
    print("The password is stored as a bcrypt hash only.")
    print()
    print("=" * 70)
    print()


def prompt_non_empty(label: str) -> str:
    while True:
        value = input(f"{label}: ").strip()
        if value:
            return value
        print(f"{label} cannot be empty.")


def prompt_password() -> str:
    """Ask for a password twice until both entries match."""
    while True:
        password = getpass.getpass("Password: ")
        if len(password) < MIN_PASSWORD_LENGTH:
            print(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")
            continue
        if getpass.getpass("Confirm password: ") != password:
            print("Passwords do not match, try again.")
            continue
        return password


def create_admin(username: str, password: str, email: Optional[str]) -> int:
    """Create the admin and return a process exit code."""
    init_db()
    db = SessionLocal()
    try:
        admin = AdminManager(db).create_admin(username, password, email=email)
    except AdminAlreadyExistsError as e:
        print(f"Error: {e}")
        return 1
    finally:
        db.close()

    print()
    print(f"Admin '{admin.username}' created (id={admin.id}).")
    return 0


def main() -> int:
    print_banner()
    username = prompt_non_empty("Username")
    email = input("Email (optional): ").strip() or None
    password = prompt_password()
    return create_admin(username, password, email)


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nCancelled.")
        sys.exit(130)
