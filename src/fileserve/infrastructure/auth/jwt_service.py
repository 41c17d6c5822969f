"""JWT token service.

Provides access token creation and validation for the optional bearer
authentication in front of the file routes.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from fileserve.core.config import get_settings


class JWTError(Exception):
    """Base exception for JWT-related errors."""

    pass


class TokenExpiredError(JWTError):
    """Raised when a token has expired."""

    pass


class InvalidTokenError(JWTError):
    """Raised when a token is invalid."""

    pass


class JWTService:
    """Service for creating and validating JWT access tokens.

    Issuer, audience and secret come from settings unless given explicitly.
    """

    ALGORITHM = "HS256"

    def __init__(
        self,
        secret_key: str | None = None,
        issuer: str | None = None,
        audience: str | None = None,
    ) -> None:
        self._secret_key = secret_key
        self._issuer = issuer
        self._audience = audience

    @property
    def secret_key(self) -> str:
        return self._secret_key or get_settings().jwt_secret_key

    @property
    def issuer(self) -> str:
        return self._issuer or get_settings().jwt_issuer

    @property
    def audience(self) -> str:
        return self._audience or get_settings().jwt_audience

    def create_access_token(
        self,
        subject: str,
        groups: list[str] | None = None,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create an access token.

        Args:
            subject: User name the token is issued to.
            groups: Group names used for allowed-group checks.
            expires_delta: Custom expiration time. Defaults to config value.

        Returns:
            Encoded JWT access token.
        """
        if expires_delta is None:
            expires_delta = timedelta(minutes=get_settings().access_token_expire_minutes)

        now = datetime.now(timezone.utc)
        payload = {
            "iss": self.issuer,
            "aud": self.audience,
            "sub": subject,
            "iat": now,
            "exp": now + expires_delta,
            "groups": list(groups or []),
            "type": "access",
        }

        return jwt.encode(payload, self.secret_key, algorithm=self.ALGORITHM)

    def decode_token(self, token: str) -> dict[str, Any]:
        """Decode and validate a JWT token.

        Raises:
            TokenExpiredError: If the token has expired.
            InvalidTokenError: If the signature, issuer or audience is wrong.
        """
        try:
            return jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.ALGORITHM],
                issuer=self.issuer,
                audience=self.audience,
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError("Token has expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError("Invalid token") from e

    def validate_access_token(self, token: str) -> dict[str, Any]:
        """Validate that a token is an access token and decode it.

        Raises:
            TokenExpiredError: If the token has expired.
            InvalidTokenError: If the token is invalid or not an access token.
        """
        payload = self.decode_token(token)
        if payload.get("type") != "access":
            raise InvalidTokenError("Not an access token")
        return payload


# Default JWT service instance
jwt_service = JWTService()
