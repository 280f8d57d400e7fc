"""Signed, time-limited access tokens."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt

from .models import AccessToken, TokenClaims


class InvalidTokenError(ValueError):
    """Raised when a token is malformed, tampered with or expired."""


class TokenIssuer:
    """Sign and decode JWT access tokens with a shared secret."""

    def __init__(
        self,
        secret: str,
        *,
        ttl: timedelta = timedelta(days=1),
        algorithm: str = "HS256",
    ) -> None:
        if not secret:
            raise ValueError("A signing secret must be provided")
        self._secret = secret
        self._ttl = ttl
        self._algorithm = algorithm

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def issue(self, subject_id: int) -> AccessToken:
        # JWT timestamps are whole seconds.
        issued_at = self._now().replace(microsecond=0)
        expires_at = issued_at + self._ttl
        payload = {"id": subject_id, "iat": issued_at, "exp": expires_at}
        token = jwt.encode(payload, self._secret, algorithm=self._algorithm)
        return AccessToken(token=token, issued_at=issued_at, expires_at=expires_at)

    def decode(self, token: str) -> TokenClaims:
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError(f"Invalid access token: {exc}") from exc

        subject = payload.get("id")
        if not isinstance(subject, int) or isinstance(subject, bool):
            raise InvalidTokenError("Access token does not identify a user")

        return TokenClaims(
            subject_id=subject,
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )

    def _now(self) -> datetime:
        return datetime.now(timezone.utc)


__all__ = ["InvalidTokenError", "TokenIssuer"]
