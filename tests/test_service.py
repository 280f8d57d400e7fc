"""End-to-end tests for the sign-in HTTP API."""

from __future__ import annotations

from fastapi.testclient import TestClient
import pytest

from sessionauth.config import Settings
from sessionauth.service import create_app
from sessionauth.store import CredentialStore
from sessionauth.tokens import TokenIssuer

SECRET = "service-tests-secret-with-at-least-32-bytes"


@pytest.fixture()
def issuer() -> TokenIssuer:
    return TokenIssuer(SECRET)


@pytest.fixture()
def client(issuer: TokenIssuer):
    app = create_app(settings=Settings(jwt_secret=SECRET), issuer=issuer)
    with TestClient(app) as test_client:
        yield test_client


def test_signin_returns_profile_and_bearer_token(client: TestClient, issuer: TokenIssuer) -> None:
    response = client.post(
        "/auth/signin",
        json={"email": "johndoe@gmail.com", "password": "test"},
    )

    assert response.status_code == 200, response.text
    assert response.json() == {
        "id": 1,
        "name": "John Doe",
        "email": "johndoe@gmail.com",
        "avatarUrl": "https://i.pravatar.cc/150?img=1",
    }

    scheme, _, token = response.headers["authorization"].partition(" ")
    assert scheme == "Bearer"
    assert issuer.decode(token).subject_id == 1


def test_signin_never_returns_password_material(client: TestClient) -> None:
    response = client.post(
        "/auth/signin",
        json={"email": "johndoe@gmail.com", "password": "test"},
    )

    assert response.status_code == 200
    body = response.json()
    assert "password" not in body
    assert "password_hash" not in body
    assert "pbkdf2" not in response.text


def test_unknown_user_is_rejected(client: TestClient) -> None:
    response = client.post(
        "/auth/signin",
        json={"email": "nobody@example.com", "password": "test"},
    )

    assert response.status_code == 400
    assert response.json() == {"message": "User not found"}
    assert "authorization" not in response.headers


def test_wrong_password_is_rejected(client: TestClient) -> None:
    response = client.post(
        "/auth/signin",
        json={"email": "johndoe@gmail.com", "password": "incorrect"},
    )

    assert response.status_code == 400
    assert response.json() == {"message": "Invalid password"}
    assert "authorization" not in response.headers


@pytest.mark.parametrize(
    "body",
    [
        {"email": "johndoe@gmail.com"},
        {"password": "test"},
        {"email": ["johndoe@gmail.com"], "password": "test"},
        [],
    ],
)
def test_malformed_body_gets_generic_error(client: TestClient, body: object) -> None:
    response = client.post("/auth/signin", json=body)

    assert response.status_code == 400
    assert response.json() == {"message": "Invalid request body"}


def test_non_json_body_gets_generic_error(client: TestClient) -> None:
    response = client.post(
        "/auth/signin",
        content=b"email=johndoe@gmail.com",
        headers={"content-type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json() == {"message": "Invalid request body"}


def test_two_sign_ins_both_verify(client: TestClient, issuer: TokenIssuer) -> None:
    tokens = []
    for _ in range(2):
        response = client.post(
            "/auth/signin",
            json={"email": "johndoe@gmail.com", "password": "test"},
        )
        assert response.status_code == 200
        tokens.append(response.headers["authorization"].split(" ", 1)[1])

    for token in tokens:
        assert issuer.decode(token).subject_id == 1


def test_custom_store_is_used(issuer: TokenIssuer) -> None:
    store = CredentialStore.from_seed(
        [{"id": 5, "name": "Alice", "email": "alice@example.com", "password": "alice-pw"}]
    )
    app = create_app(store=store, issuer=issuer)

    with TestClient(app) as client:
        ok = client.post("/auth/signin", json={"email": "alice@example.com", "password": "alice-pw"})
        missing = client.post("/auth/signin", json={"email": "johndoe@gmail.com", "password": "test"})

    assert ok.status_code == 200
    assert ok.json()["id"] == 5
    assert ok.json()["avatarUrl"] == ""
    assert missing.status_code == 400
    assert missing.json() == {"message": "User not found"}


def test_healthcheck(client: TestClient) -> None:
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_create_app_requires_jwt_secret(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("JWT_SECRET", raising=False)

    with pytest.raises(RuntimeError, match="JWT_SECRET"):
        create_app()


def test_create_app_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JWT_SECRET", SECRET)
    monkeypatch.delenv("SESSIONAUTH_USERS_PATH", raising=False)
    monkeypatch.delenv("JWT_TTL_SECONDS", raising=False)

    app = create_app()

    with TestClient(app) as client:
        response = client.post(
            "/auth/signin",
            json={"email": "johndoe@gmail.com", "password": "test"},
        )
    assert response.status_code == 200
    token = response.headers["authorization"].split(" ", 1)[1]
    assert TokenIssuer(SECRET).decode(token).subject_id == 1


def test_startup_logs_store_size_and_token_lifetime(
    issuer: TokenIssuer, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level("INFO", logger="sessionauth.service"):
        create_app(settings=Settings(jwt_secret=SECRET), issuer=issuer)

    assert "Credential store loaded with 1 user(s); access tokens valid for 1 day" in caplog.text
