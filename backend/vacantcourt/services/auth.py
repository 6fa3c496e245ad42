"""
Verify bearer ID tokens issued by the auth provider. Sign-in itself happens client-side;
the backend only checks the token signature and reads the uid ("sub") and email claims.

Configure AUTH_JWT_SECRET (HS256) or AUTH_JWT_PUBLIC_KEY (RS256/ES256 PEM), optionally
AUTH_JWT_AUDIENCE and AUTH_JWT_ISSUER.
"""
import logging
from dataclasses import dataclass

import jwt

from vacantcourt.config import Settings
from vacantcourt.core.errors import (
    MSG_INVALID_TOKEN,
    MSG_NO_TOKEN,
    STATUS_FORBIDDEN,
    STATUS_UNAUTHORIZED,
    AuthError,
)

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class AuthUser:
    uid: str
    email: str | None = None


def bearer_token(authorization: str | None) -> str:
    """Token from an 'Authorization: Bearer <token>' header. 401 when absent or malformed."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise AuthError(MSG_NO_TOKEN, STATUS_UNAUTHORIZED)
    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise AuthError(MSG_NO_TOKEN, STATUS_UNAUTHORIZED)
    return token


class TokenVerifier:
    """Decodes and verifies ID tokens with PyJWT."""

    def __init__(
        self,
        *,
        key: str,
        algorithm: str = "HS256",
        audience: str | None = None,
        issuer: str | None = None,
    ) -> None:
        self._key = key
        self._algorithm = algorithm
        self._audience = audience or None
        self._issuer = issuer or None

    @classmethod
    def from_settings(cls, s: Settings) -> "TokenVerifier":
        return cls(
            key=s.auth_jwt_public_key or s.auth_jwt_secret,
            algorithm=s.auth_jwt_algorithm,
            audience=s.auth_jwt_audience,
            issuer=s.auth_jwt_issuer,
        )

    def is_configured(self) -> bool:
        return bool(self._key)

    def verify(self, token: str) -> AuthUser:
        """Claims of a valid token as AuthUser. 403 for anything invalid or expired."""
        if not self.is_configured():
            logger.error("Token verification not configured (AUTH_JWT_SECRET / AUTH_JWT_PUBLIC_KEY)")
            raise AuthError(MSG_INVALID_TOKEN, STATUS_FORBIDDEN)
        try:
            claims = jwt.decode(
                token,
                self._key,
                algorithms=[self._algorithm],
                audience=self._audience,
                issuer=self._issuer,
                options={"require": ["sub", "exp"], "verify_aud": self._audience is not None},
            )
        except jwt.PyJWTError as e:
            logger.info("Invalid token: %s", e)
            raise AuthError(MSG_INVALID_TOKEN, STATUS_FORBIDDEN) from e
        uid = str(claims.get("sub") or "").strip()
        if not uid:
            raise AuthError(MSG_INVALID_TOKEN, STATUS_FORBIDDEN)
        email = claims.get("email")
        return AuthUser(uid=uid, email=email.strip() if isinstance(email, str) else None)

    def authenticate(self, authorization: str | None) -> AuthUser:
        return self.verify(bearer_token(authorization))
