# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for password hashing utilities.

Tests the PasswordHasher class and convenience functions.
"""

import string

import pytest

from src.domains.auth.password import (
    PasswordHasher,
    generate_password,
    hash_password,
    verify_password,
)


class TestPasswordHasher:
    """Tests for PasswordHasher class."""

    def test_hash_password_returns_bcrypt_hash(self) -> None:
        """Test that hashing returns a bcrypt hash string."""
        hasher = PasswordHasher(rounds=4)

        hashed = hasher.hash("test_password_123")

        assert hashed.startswith("$2b$04$")
        assert len(hashed) == 60

    def test_hash_produces_different_hashes_for_same_password(self) -> None:
        """Test that hashing the same password produces different hashes (due to salt)."""
        hasher = PasswordHasher(rounds=4)

        assert hasher.hash("same") != hasher.hash("same")

    def test_verify_correct_and_incorrect_password(self) -> None:
        hasher = PasswordHasher(rounds=4)
        hashed = hasher.hash("correct_password")

        assert hasher.verify("correct_password", hashed) is True
        assert hasher.verify("wrong_password", hashed) is False

    def test_verify_empty_inputs_return_false(self) -> None:
        hasher = PasswordHasher(rounds=4)
        hashed = hasher.hash("valid_password")

        assert hasher.verify("", hashed) is False
        assert hasher.verify("password", "") is False

    def test_verify_invalid_hash_returns_false(self) -> None:
        """Test that verification fails with invalid hash format."""
        hasher = PasswordHasher(rounds=4)

        assert hasher.verify("password", "not_a_valid_bcrypt_hash") is False

    def test_hash_empty_password_raises_error(self) -> None:
        """Test that hashing empty password raises ValueError."""
        hasher = PasswordHasher(rounds=4)

        with pytest.raises(ValueError, match="Password cannot be empty"):
            hasher.hash("")

    def test_unicode_password(self) -> None:
        """Test that unicode passwords work correctly."""
        hasher = PasswordHasher(rounds=4)
        password = "كلمة_المرور_١٢٣"

        assert hasher.verify(password, hasher.hash(password)) is True


class TestConvenienceFunctions:
    """Tests for module-level convenience functions."""

    def test_hash_and_verify_with_shared_hasher(self) -> None:
        hashed = hash_password("test_password")

        assert hashed.startswith("$2b$")
        assert verify_password("test_password", hashed) is True
        assert verify_password("wrong_password", hashed) is False

    def test_generate_password(self) -> None:
        """Generated passwords are 16 hex characters and not repeated."""
        first = generate_password()
        second = generate_password()

        assert len(first) == 16
        assert set(first) <= set(string.hexdigits.lower())
        assert first != second
