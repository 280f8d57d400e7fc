"""HTTP API exposing the sign-in endpoint."""

from __future__ import annotations

import logging
from typing import Dict, Optional

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .config import Settings, build_credential_store, load_settings
from .models import Credentials, UserProfile
from .signin import AuthError, SignInService
from .store import CredentialStore
from .tokens import TokenIssuer

logger = logging.getLogger("sessionauth.service")

INVALID_BODY_MESSAGE = "Invalid request body"


class SignInRequest(BaseModel):
    email: str
    password: str


class UserProfileResponse(BaseModel):
    id: int
    name: str
    email: str
    avatar_url: str = Field(..., serialization_alias="avatarUrl")

    @staticmethod
    def from_profile(profile: UserProfile) -> "UserProfileResponse":
        return UserProfileResponse(
            id=profile.id,
            name=profile.name,
            email=profile.email,
            avatar_url=profile.avatar_url,
        )


def _message_response(message: str) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": message})


def register_api_routes(app: FastAPI, service: SignInService) -> None:
    """Expose the JSON API endpoints on the provided FastAPI application."""

    @app.exception_handler(AuthError)
    async def handle_auth_error(request: Request, exc: AuthError) -> JSONResponse:
        return _message_response(exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.debug("Rejected malformed request to %s: %s", request.url.path, exc.errors())
        return _message_response(INVALID_BODY_MESSAGE)

    @app.get("/healthz")
    async def healthcheck() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/auth/signin", response_model=UserProfileResponse)
    def sign_in(request: SignInRequest, response: Response) -> UserProfileResponse:
        result = service.sign_in(Credentials(email=request.email, password=request.password))
        response.headers["authorization"] = f"Bearer {result.token.token}"
        return UserProfileResponse.from_profile(UserProfile.from_record(result.user))


def create_app(
    *,
    settings: Optional[Settings] = None,
    store: Optional[CredentialStore] = None,
    issuer: Optional[TokenIssuer] = None,
) -> FastAPI:
    """Instantiate the FastAPI application for the sign-in service."""

    if issuer is None or store is None:
        app_settings = settings or load_settings()
        if issuer is None:
            issuer = TokenIssuer(app_settings.jwt_secret, ttl=app_settings.token_ttl)
        if store is None:
            store = build_credential_store(app_settings)

    service = SignInService(store, issuer)
    logger.info(
        "Credential store loaded with %d user(s); access tokens valid for %s",
        len(service.store),
        issuer.ttl,
    )

    app = FastAPI(
        title="Session Auth API",
        version="0.1.0",
        description="Credential verification and access token issuance.",
    )
    app.state.store = store
    app.state.issuer = issuer
    app.state.signin_service = service

    register_api_routes(app, service)
    return app


__all__ = ["SignInRequest", "UserProfileResponse", "create_app", "register_api_routes"]
