# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Password hashing and generation utilities using bcrypt.

Example:
    >>> hasher = PasswordHasher()
    >>> hashed = hasher.hash("my_password")
    >>> hasher.verify("my_password", hashed)
    True
    >>> len(generate_password())
    16
"""

import logging
import secrets
from functools import lru_cache

import bcrypt

from src.core.config import get_settings

logger = logging.getLogger(__name__)

GENERATED_PASSWORD_BYTES = 8


class PasswordHasher:
    """Secure password hashing using bcrypt.

    Attributes:
        _rounds: Number of bcrypt rounds for hashing.
    """

    def __init__(self, rounds: int = 12) -> None:
        """Initialize the password hasher.

        Args:
            rounds: Number of bcrypt rounds. Higher is more secure but slower.
        """
        self._rounds = rounds

    def hash(self, password: str) -> str:
        """Hash a password using bcrypt.

        Args:
            password: Plain text password to hash.

        Returns:
            Bcrypt hash string with salt embedded.

        Raises:
            ValueError: If password is empty.
        """
        if not password:
            raise ValueError("Password cannot be empty")

        salt = bcrypt.gensalt(rounds=self._rounds)
        hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Verify a password against a hash.

        Malformed hashes are treated as a mismatch.

        Args:
            password: Plain text password to verify.
            password_hash: Bcrypt hash to verify against.

        Returns:
            True if password matches the hash, False otherwise.
        """
        if not password or not password_hash:
            return False

        try:
            return bcrypt.checkpw(
                password.encode("utf-8"),
                password_hash.encode("utf-8"),
            )
        except ValueError as e:
            logger.warning("Password verification failed: %s", str(e))
            return False


def generate_password(nbytes: int = GENERATED_PASSWORD_BYTES) -> str:
    """Generate a random password for accounts created on someone's behalf.

    Args:
        nbytes: Number of random bytes; the result has twice as many hex chars.

    Returns:
        Hex-encoded random password.
    """
    return secrets.token_hex(nbytes)


@lru_cache(maxsize=1)
def get_password_hasher() -> PasswordHasher:
    """Get the shared hasher configured from settings."""
    return PasswordHasher(rounds=get_settings().bcrypt_rounds)


def hash_password(password: str) -> str:
    """Hash a password using the shared hasher.

    Args:
        password: Plain text password to hash.

    Returns:
        Bcrypt hash string.
    """
    return get_password_hasher().hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password using the shared hasher.

    Args:
        password: Plain text password to verify.
        password_hash: Bcrypt hash to verify against.

    Returns:
        True if password matches, False otherwise.
    """
    return get_password_hasher().verify(password, password_hash)
