# storefront/api/deps.py
from dataclasses import dataclass

import jwt
from fastapi import Depends, Header, HTTPException

from storefront.domain.owner import Owner, UserOwner, GuestOwner, MAX_SESSION_ID_LENGTH
from storefront.services.user_service import ADMIN_ROLES
from storefront.utils.security import decode_access_token


@dataclass(frozen=True)
class Principal:
    """Authenticated caller, taken from the JWT claims."""

    user_id: int
    username: str
    email: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def _principal_from_token(token: str) -> Principal:
    claims = decode_access_token(token)
    return Principal(
        user_id=int(claims["user_id"]),
        username=claims.get("username", ""),
        email=claims.get("email", ""),
        role=claims.get("role", "customer"),
    )


def optional_principal(authorization: str | None = Header(None)) -> Principal | None:
    """Missing or broken token -> treated as a guest."""
    token = _bearer_token(authorization)
    if token is None:
        return None
    try:
        return _principal_from_token(token)
    except (jwt.InvalidTokenError, KeyError, ValueError):
        return None


def require_principal(authorization: str | None = Header(None)) -> Principal:
    if not authorization:
        raise HTTPException(status_code=401, detail="Authorization header required")

    token = _bearer_token(authorization)
    if token is None:
        raise HTTPException(status_code=401, detail="Invalid authorization format. Use: Bearer <token>")

    try:
        return _principal_from_token(token)
    except (jwt.InvalidTokenError, KeyError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid or expired token") from None


def require_admin(principal: Principal = Depends(require_principal)) -> Principal:
    if not principal.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return principal


def session_id_header(x_session_id: str | None = Header(None, alias="X-Session-ID")) -> str | None:
    if x_session_id is None or not x_session_id.strip():
        return None
    session_id = x_session_id.strip()
    if len(session_id) > MAX_SESSION_ID_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"X-Session-ID must be at most {MAX_SESSION_ID_LENGTH} characters",
        )
    return session_id


def resolve_owner(
    principal: Principal | None = Depends(optional_principal),
    session_id: str | None = Depends(session_id_header),
) -> Owner:
    """A valid token wins, otherwise the X-Session-ID header identifies the guest cart."""
    if principal is not None:
        return UserOwner(principal.user_id)
    if session_id is not None:
        return GuestOwner(session_id)
    raise HTTPException(
        status_code=400,
        detail="Session ID required for guest users (send X-Session-ID header)",
    )
