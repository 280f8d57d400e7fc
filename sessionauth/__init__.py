"""Session authentication service: credential store, sign-in and token issuance."""

from __future__ import annotations

from typing import Any

from .models import Credentials, UserProfile, UserRecord
from .store import CredentialStore, default_credential_store, load_credential_store


def create_app(*args: Any, **kwargs: Any):
    """Factory function that returns the sign-in API application."""

    from .service import create_app as _create_app

    return _create_app(*args, **kwargs)


__all__ = [
    "CredentialStore",
    "Credentials",
    "UserProfile",
    "UserRecord",
    "create_app",
    "default_credential_store",
    "load_credential_store",
]
