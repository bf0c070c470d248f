"""Password hashing capability, chosen once at startup."""

import hmac
import logging
from typing import Protocol

import bcrypt

logger = logging.getLogger(__name__)

BCRYPT_MAX_BYTES = 72


class PasswordHasher(Protocol):
    """Protocol for password hashing implementations."""

    def hash(self, password: str) -> str:
        """Hash a plain password for storage."""
        ...

    def verify(self, password: str, hashed: str) -> bool:
        """Check a plain password against a stored hash."""
        ...


def _bcrypt_input(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


class BcryptPasswordHasher:
    """bcrypt-backed hasher for production use.

    bcrypt only reads the first 72 bytes of a password, so longer input is
    truncated to that prefix before hashing and verifying.
    """

    def __init__(self, rounds: int = 12) -> None:
        self._rounds = rounds

    def hash(self, password: str) -> str:
        """Create a bcrypt hash from a plain password."""
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(_bcrypt_input(password), salt).decode("utf-8")

    def verify(self, password: str, hashed: str) -> bool:
        """Check if a plain password matches its hash."""
        try:
            return bcrypt.checkpw(_bcrypt_input(password), hashed.encode("utf-8"))
        except ValueError:
            # Stored value is not a bcrypt hash
            return False


class PlaintextPasswordHasher:
    """Development stub: stores passwords as-is. Never use in production."""

    def hash(self, password: str) -> str:
        return password

    def verify(self, password: str, hashed: str) -> bool:
        return hmac.compare_digest(password.encode("utf-8"), hashed.encode("utf-8"))


def get_password_hasher(name: str) -> PasswordHasher:
    """Factory for the configured hasher.

    Raises:
        ValueError: If the name is unknown
    """
    if name == "bcrypt":
        return BcryptPasswordHasher()
    if name == "plaintext":
        logger.warning("Using plaintext password hasher - development only")
        return PlaintextPasswordHasher()
    raise ValueError(f"Unknown password hasher: {name}")
