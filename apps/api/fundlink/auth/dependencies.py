"""FastAPI auth dependencies: get_current_user, require_role."""

import uuid

import sentry_sdk
import structlog
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from fundlink.core.config import settings
from fundlink.models.enums import UserRole
from fundlink.schemas.auth import CurrentUser

logger = structlog.get_logger()

bearer_scheme = HTTPBearer(auto_error=True)


def decode_access_token(token: str) -> CurrentUser:
    """Decode an HS256 access token into the acting user.

    Tokens are issued elsewhere; this only verifies the signature and reads
    the ``sub`` (profile id) and ``role`` claims.
    """
    payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])

    subject = payload.get("sub")
    role = payload.get("role")
    if not subject or not role:
        raise JWTError("Token missing subject or role claim")

    try:
        return CurrentUser(user_id=uuid.UUID(str(subject)), role=UserRole(role))
    except ValueError as e:
        raise JWTError(f"Malformed claims: {e}") from e


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
) -> CurrentUser:
    """Verify the bearer JWT and return the acting user."""
    try:
        current_user = decode_access_token(credentials.credentials)
    except JWTError as e:
        logger.warning("jwt_verification_failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    # Enrich Sentry scope with identity (PII-free: no email)
    sentry_sdk.set_user({"id": str(current_user.user_id)})
    sentry_sdk.set_tag("user_role", current_user.role.value)

    return current_user


def require_role(allowed_roles: list[UserRole]):
    """
    Dependency factory: checks if current user has one of the allowed roles.

    Usage:
        @router.post("/funding-requests/{id}/assign", dependencies=[Depends(require_role([UserRole.ADMIN]))])
    """

    async def _check_role(
        current_user: CurrentUser = Depends(get_current_user),
    ) -> CurrentUser:
        if current_user.role not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Role '{current_user.role.value}' not authorized. Required: {[r.value for r in allowed_roles]}",
            )
        return current_user

    return _check_role
