"""Password hashing backed by bcrypt."""

from typing import Optional

import bcrypt

# bcrypt only reads the first 72 bytes of a password.
_BCRYPT_MAX_BYTES = 72


class PasswordHasher:
    """Hashes and verifies account passwords."""

    def __init__(self, rounds: int = 10):
        if not 4 <= rounds <= 31:
            raise ValueError("bcrypt rounds must be between 4 and 31")
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """
        Hash a plaintext password with a fresh salt.

        Args:
            password: Plain text password, must not be empty

        Returns:
            bcrypt hash string ("$2b$...")

        Raises:
            ValueError: If the password is empty
        """
        if not password:
            raise ValueError("Cannot hash an empty password")
        return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, password: str, password_hash: Optional[str]) -> bool:
        """Return True when the password matches the stored hash, False otherwise."""
        if not password or not password_hash:
            return False
        try:
            return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
        except ValueError:
            return False


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
