"""Command-line interface for the session authentication service."""

from __future__ import annotations
import argparse
import logging
import os
import sys
from getpass import getpass
from pathlib import Path
from typing import Sequence

import httpx

from sessionauth.client import AuthContext, SignInError
from sessionauth.config import resolve_users_path
from sessionauth.models import Credentials
from sessionauth.store import CredentialStore, default_credential_store, load_credential_store

logger = logging.getLogger("sessionauth.main")

_DEFAULT_SERVICE_URL = "http://localhost:8000"


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Session authentication service utilities")
    subparsers = parser.add_subparsers(dest="command")

    parser.set_defaults(command="serve")

    serve_parser = subparsers.add_parser("serve", help="Start the HTTP sign-in service")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address for the API")
    serve_parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port for the HTTP API (default: 8000)",
    )
    serve_parser.add_argument(
        "--users-file",
        default=None,
        help="YAML users file (defaults to SESSIONAUTH_USERS_PATH or the built-in seed)",
    )

    signin_parser = subparsers.add_parser(
        "signin", help="Sign in against a running service and print the session state"
    )
    signin_parser.add_argument(
        "--service-url",
        default=None,
        help=f"Base URL of a running sign-in service (default: {_DEFAULT_SERVICE_URL})",
    )
    signin_parser.add_argument("--email", required=True, help="Account email address")

    users_parser = subparsers.add_parser("users", help="List the configured user accounts")
    users_parser.add_argument(
        "--users-file",
        default=None,
        help="YAML users file (defaults to SESSIONAUTH_USERS_PATH or the built-in seed)",
    )

    args_list = list(argv) if argv is not None else sys.argv[1:]
    known_commands = {"serve", "signin", "users"}

    if not args_list:
        args_list = ["serve"]
    else:
        first = args_list[0]
        if first in ("-h", "--help"):
            return parser.parse_args(args_list)
        if first not in known_commands:
            if any(flag in args_list for flag in ("-h", "--help")):
                return parser.parse_args(args_list)
            args_list = ["serve", *args_list]

    return parser.parse_args(args_list)


def _users_path(cli_value: str | None) -> Path | None:
    return resolve_users_path(cli_value or os.getenv("SESSIONAUTH_USERS_PATH"))


def _load_store(cli_value: str | None) -> CredentialStore:
    path = _users_path(cli_value)
    if path is None:
        return default_credential_store()
    logger.info("Loading users from %s", path)
    return load_credential_store(path)


def _serve(*, host: str, port: int, users_file: str | None) -> None:
    from sessionauth.service import create_app
    import uvicorn

    try:
        app = create_app(store=_load_store(users_file))
    except (RuntimeError, ValueError) as exc:
        raise SystemExit(f"Unable to start sign-in service: {exc}") from exc

    logger.info("Starting sign-in API on http://%s:%s", host, port)
    uvicorn.run(app, host=host, port=port, log_level="info")


def _list_users(store: CredentialStore) -> None:
    print(f"{len(store)} user(s) configured:")
    print(f"{'ID':>4}  {'Name':<24}  Email")
    print("-" * 60)
    for user in store:
        print(f"{user.id:>4}  {user.name:<24}  {user.email}")


def _sign_in(service_url: str | None, email: str) -> int:
    base_url = (service_url or _DEFAULT_SERVICE_URL).rstrip("/")
    password = getpass("Password: ")

    with httpx.Client(base_url=base_url, timeout=10.0) as http:
        context = AuthContext(http)
        try:
            context.sign_in(Credentials(email=email, password=password))
        except SignInError as exc:
            print(f"Sign-in failed: {exc.message}")
            return 1
        except httpx.HTTPError as exc:
            print(f"Failed to contact sign-in service: {exc}")
            return 1

    user = context.user
    assert user is not None
    print("Authenticated" if context.is_authenticated else "Not authenticated")
    print(f"Signed in as #{user.id}: {user.name} <{user.email}>")
    print(f"Access token: {context.token}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for CLI usage."""

    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")

    args = _parse_args(argv)

    if args.command == "serve":
        _serve(host=args.host, port=args.port, users_file=args.users_file)
    elif args.command == "signin":
        return _sign_in(args.service_url, args.email)
    elif args.command == "users":
        try:
            store = _load_store(args.users_file)
        except ValueError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
        _list_users(store)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
