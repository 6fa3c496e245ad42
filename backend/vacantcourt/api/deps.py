"""Shared route dependencies: store handle, settings and the signed-in user."""
from fastapi import Depends, Header, Request

from vacantcourt.config import Settings
from vacantcourt.services.auth import AuthUser, TokenVerifier
from vacantcourt.services.store.base import FacilityStore


def get_store(request: Request) -> FacilityStore:
    return request.app.state.store


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_verifier(request: Request) -> TokenVerifier:
    return request.app.state.verifier


def current_user(
    authorization: str | None = Header(None),
    verifier: TokenVerifier = Depends(get_verifier),
) -> AuthUser:
    """Verified caller. Raises AuthError (401 no token, 403 invalid) before any data access."""
    return verifier.authenticate(authorization)
