"""Password hashing helpers for the credential store."""
from __future__ import annotations

from passlib.context import CryptContext

_pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    if not password:
        raise ValueError("Password must not be empty")
    return _pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    """Check ``password`` against a stored hash without raising on bad input."""

    if not password or not hashed:
        return False
    try:
        return _pwd_context.verify(password, hashed)
    except ValueError:
        return False


__all__ = ["hash_password", "verify_password"]
