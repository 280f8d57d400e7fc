"""Read-only registry of user accounts that may sign in."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Mapping, Optional

import yaml

from .models import UserRecord
from .security import hash_password

DEFAULT_SEED: List[Dict[str, object]] = [
    {
        "id": 1,
        "name": "John Doe",
        "email": "johndoe@gmail.com",
        "avatar_url": "https://i.pravatar.cc/150?img=1",
        "password": "test",
    },
]


def _required_text(data: Mapping[str, object], field: str) -> str:
    value = data[field]
    if value is None or not str(value).strip():
        raise ValueError(f"User field '{field}' must not be blank")
    return str(value)


def _required_id(data: Mapping[str, object]) -> int:
    value = data["id"]
    if value is None or isinstance(value, bool):
        raise ValueError("User field 'id' must be an integer")
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ValueError(f"User field 'id' must be an integer, got {value!r}") from exc


def _record_from_dict(data: Mapping[str, object]) -> UserRecord:
    """Create a :class:`UserRecord` from raw seed data."""

    if not isinstance(data, Mapping):
        raise ValueError("Each user entry must be a mapping")

    required_fields = {"id", "name", "email"}
    missing = required_fields - data.keys()
    if missing:
        raise ValueError(f"Missing required user fields: {', '.join(sorted(missing))}")

    user_id = _required_id(data)
    name = _required_text(data, "name")
    email = _required_text(data, "email")

    if data.get("password_hash"):
        password_hash = str(data["password_hash"])
    elif data.get("password"):
        password_hash = hash_password(str(data["password"]))
    else:
        raise ValueError(f"User '{email}' must define either 'password' or 'password_hash'")

    return UserRecord(
        id=user_id,
        name=name,
        email=email,
        avatar_url=str(data.get("avatar_url") or data.get("avatar") or ""),
        password_hash=password_hash,
    )


class CredentialStore:
    """Immutable collection of users keyed by their email address."""

    def __init__(self, users: Iterable[UserRecord]) -> None:
        records = tuple(users)
        if not records:
            raise ValueError("Credential store must contain at least one user")

        seen_emails: set[str] = set()
        seen_ids: set[int] = set()
        for record in records:
            if record.email in seen_emails:
                raise ValueError(f"Duplicate user email '{record.email}'")
            if record.id in seen_ids:
                raise ValueError(f"Duplicate user id {record.id}")
            seen_emails.add(record.email)
            seen_ids.add(record.id)

        self._users = records

    @classmethod
    def from_seed(cls, entries: Iterable[Mapping[str, object]]) -> "CredentialStore":
        return cls(_record_from_dict(entry) for entry in entries)

    def find_by_email(self, email: str) -> Optional[UserRecord]:
        for user in self._users:
            if user.email == email:
                return user
        return None

    def __iter__(self) -> Iterator[UserRecord]:
        return iter(self._users)

    def __len__(self) -> int:
        return len(self._users)


def default_credential_store() -> CredentialStore:
    return CredentialStore.from_seed(DEFAULT_SEED)


def load_credential_store(path: Path) -> CredentialStore:
    """Load user accounts from a YAML file with a top-level ``users`` list."""

    try:
        with path.open("r", encoding="utf-8") as handle:
            raw = yaml.safe_load(handle) or {}
    except OSError as exc:
        raise ValueError(f"Unable to read users file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ValueError(f"Users file {path} is not valid YAML: {exc}") from exc

    users_raw = raw.get("users") if isinstance(raw, dict) else None
    if not users_raw:
        raise ValueError("Users file must define at least one user under the 'users' key")

    return CredentialStore.from_seed(users_raw)


__all__ = [
    "CredentialStore",
    "DEFAULT_SEED",
    "default_credential_store",
    "load_credential_store",
]
