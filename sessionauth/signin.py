"""Credential verification and token issuance."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from .models import AccessToken, Credentials, UserRecord
from .security import verify_password
from .store import CredentialStore
from .tokens import TokenIssuer

logger = logging.getLogger("sessionauth.signin")


class AuthErrorReason(str, Enum):
    USER_NOT_FOUND = "user_not_found"
    INVALID_PASSWORD = "invalid_password"


class AuthError(Exception):
    """Base class for sign-in failures caused by the submitted credentials."""

    reason: AuthErrorReason
    message: str = "Authentication failed"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class UserNotFoundError(AuthError):
    reason = AuthErrorReason.USER_NOT_FOUND
    message = "User not found"


class InvalidPasswordError(AuthError):
    reason = AuthErrorReason.INVALID_PASSWORD
    message = "Invalid password"


@dataclass(frozen=True)
class SignInResult:
    token: AccessToken
    user: UserRecord


class SignInService:
    """Validate credentials against a :class:`CredentialStore` and issue tokens."""

    def __init__(self, store: CredentialStore, issuer: TokenIssuer) -> None:
        self._store = store
        self._issuer = issuer

    @property
    def store(self) -> CredentialStore:
        return self._store

    def sign_in(self, credentials: Credentials) -> SignInResult:
        user = self._store.find_by_email(credentials.email)
        if user is None:
            logger.info("Sign-in rejected for %s: unknown email", credentials.email)
            raise UserNotFoundError()

        if not verify_password(credentials.password, user.password_hash):
            logger.info("Sign-in rejected for user %s: invalid password", user.id)
            raise InvalidPasswordError()

        token = self._issuer.issue(user.id)
        logger.info("User %s signed in; token expires at %s", user.id, token.expires_at.isoformat())
        return SignInResult(token=token, user=user)


__all__ = [
    "AuthError",
    "AuthErrorReason",
    "InvalidPasswordError",
    "SignInResult",
    "SignInService",
    "UserNotFoundError",
]
