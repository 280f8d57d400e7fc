"""Domain models for the sign-in service."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Dict


@dataclass(frozen=True)
class UserRecord:
    """Represents a user account held by the credential store."""

    id: int
    name: str
    email: str
    avatar_url: str
    password_hash: str


@dataclass(frozen=True)
class Credentials:
    email: str
    password: str


@dataclass(frozen=True)
class UserProfile:
    """Public view of a user; never carries password material."""

    id: int
    name: str
    email: str
    avatar_url: str

    @staticmethod
    def from_record(record: UserRecord) -> "UserProfile":
        return UserProfile(
            id=record.id,
            name=record.name,
            email=record.email,
            avatar_url=record.avatar_url,
        )

    @staticmethod
    def from_dict(data: Dict[str, object]) -> "UserProfile":
        return UserProfile(
            id=int(data["id"]),  # type: ignore[arg-type]
            name=str(data["name"]),
            email=str(data["email"]),
            avatar_url=str(data.get("avatarUrl") or ""),
        )


@dataclass(frozen=True)
class AccessToken:
    token: str
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class TokenClaims:
    subject_id: int
    issued_at: datetime
    expires_at: datetime


__all__ = ["AccessToken", "Credentials", "TokenClaims", "UserProfile", "UserRecord"]
