"""Environment-driven configuration for the sign-in service."""
from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Mapping, Optional

from .store import CredentialStore, default_credential_store, load_credential_store

DEFAULT_TOKEN_TTL = timedelta(days=1)


@dataclass(frozen=True)
class Settings:
    """Process-wide settings, read once at start-up."""

    jwt_secret: str
    token_ttl: timedelta = DEFAULT_TOKEN_TTL
    users_path: Optional[Path] = None


def resolve_users_path(env_value: Optional[str]) -> Optional[Path]:
    """Resolve the path to the YAML users file, if one is configured."""
    if not env_value or not env_value.strip():
        return None
    return Path(env_value.strip()).expanduser().resolve(strict=False)


def _parse_ttl(raw: Optional[str]) -> timedelta:
    if raw is None or not raw.strip():
        return DEFAULT_TOKEN_TTL
    try:
        seconds = int(raw)
    except ValueError as exc:
        raise ValueError(f"JWT_TTL_SECONDS must be an integer, got {raw!r}") from exc
    if seconds <= 0:
        raise ValueError("JWT_TTL_SECONDS must be positive")
    return timedelta(seconds=seconds)


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if environ is None else environ

    secret = (env.get("JWT_SECRET") or "").strip()
    if not secret:
        raise RuntimeError("JWT_SECRET must be set to sign access tokens")

    return Settings(
        jwt_secret=secret,
        token_ttl=_parse_ttl(env.get("JWT_TTL_SECONDS")),
        users_path=resolve_users_path(env.get("SESSIONAUTH_USERS_PATH")),
    )


def build_credential_store(settings: Settings) -> CredentialStore:
    if settings.users_path is None:
        return default_credential_store()
    return load_credential_store(settings.users_path)


__all__ = [
    "DEFAULT_TOKEN_TTL",
    "Settings",
    "build_credential_store",
    "load_settings",
    "resolve_users_path",
]
