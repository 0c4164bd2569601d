"""
User Repository - accounts and password checks.

Passwords are stored as werkzeug password hashes.
"""

import sqlite3
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from core.models import User
from database import get_db_connection
from utils.errors import BadRequestError
from utils.logging_config import get_logger

logger = get_logger('UserRepository')


def create_user(username, password, is_admin=False) -> User:
    """Create an account.

    Raises:
        BadRequestError: If the username or password is empty, or the username is taken
    """
    username = (username or "").strip()
    if not username:
        raise BadRequestError("Username cannot be empty")
    if not password:
        raise BadRequestError("Password cannot be empty")

    try:
        with get_db_connection() as conn:
            cursor = conn.execute(
                "INSERT INTO users (username, password_hash, is_admin) VALUES (?, ?, ?)",
                (username, generate_password_hash(password), 1 if is_admin else 0),
            )
            conn.commit()
            user_id = cursor.lastrowid
    except sqlite3.IntegrityError as e:
        raise BadRequestError(f"User '{username}' already exists") from e

    logger.info(f"Created {'admin ' if is_admin else ''}user '{username}'")
    return User(id=user_id, username=username, is_admin=bool(is_admin))


def get_user(user_id) -> Optional[User]:
    with get_db_connection() as conn:
        row = conn.execute("SELECT id, username, is_admin FROM users WHERE id = ?", (user_id,)).fetchone()
        return User.from_row(row) if row else None


def authenticate(username, password) -> Optional[User]:
    """The user for these credentials, or None."""
    with get_db_connection() as conn:
        row = conn.execute(
            "SELECT id, username, is_admin, password_hash FROM users WHERE username = ?",
            ((username or "").strip(),),
        ).fetchone()

    if row is None or not check_password_hash(row['password_hash'], password or ""):
        return None
    return User.from_row(row)
