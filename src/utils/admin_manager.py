"""Admin management utilities.

This module provides admin account storage, password hashing and
credential checks.
"""

import logging
from typing import Optional

import bcrypt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.exceptions import ConflictError, UnauthorizedError
from models.admin import AdminModel

logger = logging.getLogger(__name__)

# Bcrypt rounds for password hashing (higher = more secure but slower)
BCRYPT_ROUNDS = 12

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_PASSWORD_BYTES = 72


class AdminAlreadyExistsError(ConflictError):
    """Exception raised when trying to create an admin that already exists."""

    pass


def _password_bytes(password) -> bytes:
    if isinstance(password, str):
        password = password.encode("utf-8")
    if len(password) > BCRYPT_MAX_PASSWORD_BYTES:
        logger.warning(
            "Password exceeds %d bytes (%d bytes), truncating",
            BCRYPT_MAX_PASSWORD_BYTES,
            len(password),
        )
        password = password[:BCRYPT_MAX_PASSWORD_BYTES]
    return password


def hash_password(password: str) -> str:
    """Hash a password using bcrypt.

    Args:
        password: Plain text password.

    Returns:
        Hashed password (bcrypt hash string).
    """
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a bcrypt hash.

    Args:
        plain_password: Plain text password to verify.
        hashed_password: Bcrypt hash string to verify against.

    Returns:
        True if password matches, False otherwise (including a malformed hash).
    """
    if isinstance(hashed_password, str):
        hashed_password = hashed_password.encode("utf-8")
    try:
        return bcrypt.checkpw(_password_bytes(plain_password), hashed_password)
    except ValueError as e:
        logger.error("Password verification error: %s", e)
        return False


class AdminManager:
    """Manages admin accounts using SQLAlchemy."""

    def __init__(self, db: Session):
        """Initialize AdminManager.

        Args:
            db: SQLAlchemy Session.
        """
        self.db = db

    def create_admin(
        self,
        username: str,
        password: str,
        email: Optional[str] = None,
    ) -> AdminModel:
        """Create a new admin account.

        Args:
            username: Unique login name.
            password: Plain text password; only its bcrypt hash is stored.
            email: Optional contact address.

        Returns:
            Created AdminModel instance.

        Raises:
            AdminAlreadyExistsError: If the username is taken.
        """
        if self.get_admin_by_username(username) is not None:
            raise AdminAlreadyExistsError(f"Admin '{username}' already exists")

        model = AdminModel(
            username=username,
            password_hash=hash_password(password),
            email=email,
        )
        # Two concurrent creations can both pass the check above; the unique
        # constraint on username decides.
        try:
            self.db.add(model)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise AdminAlreadyExistsError(f"Admin '{username}' already exists") from e
        self.db.refresh(model)

        logger.info("Created admin: %s", username)
        return model

    def get_admin_by_username(self, username: str) -> Optional[AdminModel]:
        return self.db.query(AdminModel).filter(AdminModel.username == username).first()

    def get_admin_by_id(self, admin_id: int) -> Optional[AdminModel]:
        return self.db.query(AdminModel).filter(AdminModel.id == admin_id).first()

    def authenticate(self, username: str, password: str) -> AdminModel:
        """Check a username/password pair.

        Args:
            username: Login name.
            password: Plain text password.

        Returns:
            The matching AdminModel.

        Raises:
            UnauthorizedError: If the admin does not exist or the password is wrong.
        """
        admin = self.get_admin_by_username(username)
        if admin is None or not verify_password(password, admin.password_hash):
            logger.warning("Failed admin login for username: %s", username)
            raise UnauthorizedError("Invalid credentials")
        return admin
