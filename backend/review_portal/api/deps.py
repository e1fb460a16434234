# review_portal/api/deps.py
from dataclasses import dataclass, field

from fastapi import Header

from review_portal.core.errors import ForbiddenError, UnauthorizedError
from review_portal.core.revocation import denylist
from review_portal.core.security import InvalidTokenError, decode_access_token


@dataclass(frozen=True)
class Identity:
    """Request-scoped identity taken from a verified bearer token."""
    user_id: str
    email: str
    claims: dict = field(default_factory=dict)


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token from an `Authorization: Bearer <token>` header, or None."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    token = token.strip()
    return token or None


def get_current_identity(authorization: str | None = Header(default=None)) -> Identity:
    """
    FastAPI dependency guarding protected routes.

    Per request:
      - no bearer token             -> 401 (credential absent)
      - token fails verification    -> 403 (malformed, forged, expired or revoked)
      - token verifies              -> Identity handed to the route handler

    Verification is a pure signature/expiry check; no database lookup happens
    here.

    Usage:
        @router.get("/protected")
        async def protected_route(identity: Identity = Depends(get_current_identity)):
            return {"userId": identity.user_id}
    """
    token = extract_bearer_token(authorization)
    if not token:
        raise UnauthorizedError("Authentication required")

    try:
        claims = decode_access_token(token)
    except InvalidTokenError:
        raise ForbiddenError("Invalid or expired token")

    if denylist.is_revoked(claims.get("jti")):
        raise ForbiddenError("Invalid or expired token")

    return Identity(user_id=claims["userId"], email=claims["email"], claims=claims)
