"""JWT authentication dependency for FastAPI.

Validates Bearer tokens from the Authorization header, extracts user claims,
and sets request.state.user for downstream middleware and dependencies.
The active company comes from the ``company_id`` claim unless the request
overrides it with the active-company header.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from src.config import settings
from src.exceptions import UnauthorizedException

logger = logging.getLogger(__name__)

# FastAPI security scheme: extracts Bearer token from Authorization header
_bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class AuthenticatedUser:
    """Represents the authenticated user extracted from a JWT token."""

    id: int
    email: str
    is_admin: bool = False
    active_company_id: int | None = None
    impersonator_id: int | None = None


def create_access_token(
    user_id: int,
    email: str,
    is_admin: bool = False,
    company_id: int | None = None,
    impersonator_id: int | None = None,
) -> str:
    expires_at = datetime.now(timezone.utc) + timedelta(minutes=settings.jwt_expiry_minutes)
    claims = {
        "sub": str(user_id),
        "email": email,
        "is_admin": is_admin,
        "exp": expires_at,
    }
    if company_id is not None:
        claims["company_id"] = company_id
    if impersonator_id is not None:
        claims["impersonator_id"] = impersonator_id
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def _decode_token(token: str) -> dict:
    """Decode and validate a JWT token. Raises UnauthorizedException on failure."""
    try:
        return jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as exc:
        logger.warning("JWT validation failed: %s", exc)
        raise UnauthorizedException("Invalid or expired token") from exc


def _active_company_from_request(request: Request, payload: dict) -> int | None:
    # Header selection is parsed by TenantContextMiddleware
    selected = getattr(request.state, "active_company_id", None)
    if selected is not None:
        return selected
    claimed = payload.get("company_id")
    if claimed is None:
        return None
    try:
        return int(claimed)
    except (TypeError, ValueError) as exc:
        raise UnauthorizedException("Token company_id claim must be an integer") from exc


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
) -> AuthenticatedUser:
    """FastAPI dependency that extracts and validates the current user from JWT.

    Sets request.state.user so that ``get_tenant_context`` and error handlers
    can see who made the request.
    """
    if credentials is None:
        raise UnauthorizedException("Authentication required")

    payload = _decode_token(credentials.credentials)

    try:
        user = AuthenticatedUser(
            id=int(payload["sub"]),
            email=payload["email"],
            is_admin=bool(payload.get("is_admin", False)),
            active_company_id=_active_company_from_request(request, payload),
            impersonator_id=payload.get("impersonator_id"),
        )
    except (KeyError, ValueError) as exc:
        raise UnauthorizedException("Token is missing required claims") from exc

    request.state.user = user
    return user
