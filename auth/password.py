"""
Password hashing and verification.

Uses bcrypt for password hashing with automatic
salting and configurable work factor.  bcrypt only reads the first 72
bytes of a password, so longer passwords are cut to that many bytes
before hashing and checking.
"""

from __future__ import annotations

from functools import cached_property

import bcrypt

DEFAULT_ROUNDS = 10
BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode()[:BCRYPT_MAX_BYTES]


class PasswordHasher:
    """bcrypt wrapper; the work factor comes from ``Settings.bcrypt_rounds``."""

    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        self.rounds = rounds

    @cached_property
    def _dummy_hash(self) -> str:
        return self.hash("dummy-password-for-unknown-users")

    def hash(self, password: str) -> str:
        """Hash a password with bcrypt (fresh salt per call)."""
        return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=self.rounds)).decode()

    def verify(self, password: str, password_hash: str) -> bool:
        """Constant-time comparison against a bcrypt hash."""
        try:
            return bcrypt.checkpw(_encode(password), password_hash.encode())
        except (ValueError, TypeError):
            return False

    def verify_unknown(self, password: str) -> bool:
        """Spend the same bcrypt work as ``verify`` when there is no stored hash."""
        self.verify(password, self._dummy_hash)
        return False
