"""Client-side authentication state backed by the sign-in API."""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from .models import Credentials, UserProfile

logger = logging.getLogger("sessionauth.client")

SIGNIN_PATH = "/auth/signin"


class SignInError(Exception):
    """Raised when the service refuses a sign-in attempt."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _parse_bearer(header: Optional[str]) -> Optional[str]:
    if not header:
        return None
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


class AuthContext:
    """Holds the signed-in user for the rest of a client application.

    The context starts unauthenticated and only changes when
    :meth:`sign_in` succeeds. Failed attempts leave it untouched.
    """

    def __init__(self, http: httpx.Client) -> None:
        self._http = http
        self._user: Optional[UserProfile] = None
        self._token: Optional[str] = None

    @property
    def user(self) -> Optional[UserProfile]:
        return self._user

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    def sign_in(self, credentials: Credentials) -> UserProfile:
        response = self._http.post(
            SIGNIN_PATH,
            json={"email": credentials.email, "password": credentials.password},
        )

        if response.status_code == 400:
            raise SignInError(self._error_message(response), response.status_code)
        if response.status_code != 200:
            raise SignInError(
                f"Service responded with {response.status_code}",
                response.status_code,
            )

        token = _parse_bearer(response.headers.get("authorization"))
        if token is None:
            raise SignInError("Service did not return an access token", response.status_code)

        try:
            profile = UserProfile.from_dict(response.json())
        except (ValueError, KeyError, TypeError) as exc:
            raise SignInError("Service returned an unexpected response format", response.status_code) from exc

        self._user = profile
        self._token = token
        logger.info("Signed in as %s", profile.email)
        return profile

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            payload = response.json()
        except ValueError:
            return response.text.strip() or "Sign-in failed"
        if isinstance(payload, dict) and payload.get("message"):
            return str(payload["message"])
        return "Sign-in failed"


__all__ = ["AuthContext", "SignInError", "SIGNIN_PATH"]
