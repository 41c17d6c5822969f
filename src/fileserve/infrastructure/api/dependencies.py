"""FastAPI dependencies for services and optional bearer authorization."""

from dataclasses import dataclass, field
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from fileserve.core.config import Settings, get_settings
from fileserve.core.logging import get_logger
from fileserve.domain.services import BatchOrchestrator, FileRetrievalService
from fileserve.infrastructure.auth import InvalidTokenError, JWTService, TokenExpiredError

logger = get_logger(__name__)


@dataclass
class CallerIdentity:
    """Authenticated caller, extracted from a valid JWT access token."""

    subject: str
    groups: list[str] = field(default_factory=list)


def get_app_settings() -> Settings:
    """Settings dependency; overridden in tests."""
    return get_settings()


SettingsDep = Annotated[Settings, Depends(get_app_settings)]


def get_file_service(settings: SettingsDep) -> FileRetrievalService:
    return FileRetrievalService(settings)


def get_batch_orchestrator(
    service: Annotated[FileRetrievalService, Depends(get_file_service)],
) -> BatchOrchestrator:
    return BatchOrchestrator(service)


def get_token_validator(settings: Settings) -> JWTService:
    """JWT service bound to the secret, issuer and audience of these settings."""
    return JWTService(
        secret_key=settings.jwt_secret_key,
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
    )


def is_caller_allowed(identity: CallerIdentity, settings: Settings) -> bool:
    """Check the caller against the allowed user and group lists.

    With both lists empty every authenticated caller is allowed. Names are
    compared case-insensitively.
    """
    if not settings.allowed_users and not settings.allowed_groups:
        return True

    allowed_users = {user.lower() for user in settings.allowed_users}
    if identity.subject.lower() in allowed_users:
        return True

    allowed_groups = {group.lower() for group in settings.allowed_groups}
    return any(group.lower() in allowed_groups for group in identity.groups)


async def require_authorized_caller(
    settings: SettingsDep,
    authorization: Annotated[str | None, Header()] = None,
) -> CallerIdentity | None:
    """Enforce bearer authentication when it is enabled.

    Returns:
        The caller identity, or None when authentication is disabled or
        anonymous access is allowed.

    Raises:
        HTTPException: 401 if the token is missing, invalid, or expired;
            403 if the caller is not in the allowed users or groups.
    """
    if not settings.auth_enabled or settings.auth_allow_anonymous:
        return None

    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if authorization is None:
        logger.info("Authentication failed: missing Authorization header")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing Authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        logger.info("Authentication failed: invalid Authorization header format")
        raise credentials_exception

    try:
        payload = get_token_validator(settings).validate_access_token(parts[1])
    except TokenExpiredError:
        logger.info("Authentication failed: token expired")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except InvalidTokenError as e:
        logger.info("Authentication failed: invalid token", error=str(e))
        raise credentials_exception

    groups = payload.get("groups") or []
    identity = CallerIdentity(
        subject=str(payload.get("sub", "")),
        groups=[str(group) for group in groups] if isinstance(groups, list) else [],
    )

    if not is_caller_allowed(identity, settings):
        logger.warning(
            "Authorization denied",
            subject=identity.subject,
            groups=identity.groups,
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You are not allowed to access these files",
        )

    return identity


FileServiceDep = Annotated[FileRetrievalService, Depends(get_file_service)]
BatchOrchestratorDep = Annotated[BatchOrchestrator, Depends(get_batch_orchestrator)]
