# review_portal/core/security.py
"""
Security module for authentication.
Handles password hashing and the issue/verify cycle of signed bearer tokens.
"""
import datetime as dt
import uuid

import jwt  # PyJWT
from passlib.context import CryptContext
from passlib.exc import InternalBackendError, MissingBackendError, UnknownHashError

from review_portal.config import settings
from review_portal.core.errors import InternalError

# Password hashing context
# Argon2 with a pinned work factor so every stored digest costs the same to check
pwd_context = CryptContext(
    schemes=["argon2"],
    deprecated="auto",
    argon2__time_cost=3,
    argon2__memory_cost=65536,
    argon2__parallelism=4,
)

MIN_PASSWORD_LENGTH = 6
JWT_ALG = "HS256"  # JWT signing algorithm (HMAC SHA-256)
REQUIRED_CLAIMS = ["userId", "email", "iat", "exp"]

# Backend and digest failures raised by passlib; UnknownHashError is a ValueError
PASSLIB_FAILURES = (UnknownHashError, MissingBackendError, InternalBackendError, ValueError, TypeError)

_dummy_hash: str | None = None


class PasswordPolicyError(ValueError):
    """Raised when a plaintext password does not meet the minimum policy."""


class HashingError(InternalError):
    """Raised when the hashing backend fails; never means "wrong password"."""


class TokenSigningError(InternalError):
    """Raised when a token cannot be issued (e.g. no signing secret)."""


class InvalidTokenError(Exception):
    """
    Raised when a token cannot be trusted.

    Malformed tokens, signature mismatches, expired tokens and a missing
    signing secret all collapse into this single error.
    """


def check_password_policy(plain: str) -> None:
    if plain is None or len(plain) < MIN_PASSWORD_LENGTH:
        raise PasswordPolicyError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")


def hash_password(plain: str) -> str:
    """
    Hash a plain text password using Argon2.

    Args:
        plain: Plain text password, at least MIN_PASSWORD_LENGTH characters

    Returns:
        Hashed password string (safe to store in database)

    Raises:
        PasswordPolicyError: If the password is too short (checked before hashing)
        HashingError: If the hashing backend fails
    """
    check_password_policy(plain)
    try:
        return pwd_context.hash(plain)
    except PASSLIB_FAILURES as exc:
        raise HashingError(f"password hashing failed: {exc}") from exc


def verify_password(plain: str, hashed: str) -> bool:
    """
    Verify a plain text password against a stored hash.

    Returns:
        True if password matches, False otherwise

    Raises:
        HashingError: If the stored digest is unreadable or the backend fails
    """
    try:
        return pwd_context.verify(plain, hashed)
    except PASSLIB_FAILURES as exc:
        raise HashingError(f"password verification failed: {exc}") from exc


def dummy_password_hash() -> str:
    """
    Argon2 digest of a throwaway value, computed once.

    Login verifies against it when the email is unknown so that unknown
    accounts cost the same Argon2 work as a wrong password.
    """
    global _dummy_hash
    if _dummy_hash is None:
        _dummy_hash = hash_password(uuid.uuid4().hex)
    return _dummy_hash


def ensure_signing_secret(secret: str | None = None) -> str:
    """
    Return the configured signing secret, refusing to run without one.

    Called at startup so a misconfigured deployment fails loudly instead of
    signing tokens with a guessable value.
    """
    secret = secret if secret is not None else settings.jwt_secret
    if not secret:
        raise RuntimeError("JWT_SECRET is not configured; refusing to start without a signing secret")
    return secret


def create_access_token(
    user_id: str,
    email: str,
    secret: str | None = None,
    ttl: dt.timedelta | None = None,
) -> str:
    """
    Create a signed bearer token for an authenticated user.

    Args:
        user_id: Unique user identifier (UUID string)
        email: Normalised user email
        secret: Signing secret (defaults to settings.jwt_secret)
        ttl: Token lifetime (defaults to settings.token_ttl_hours)

    Returns:
        Encoded JWT token string

    Token payload includes:
        - userId, email: identity claims
        - iat: Issued at timestamp
        - exp: Expiration timestamp
        - jti: Token id, used only for revocation
    """
    secret = secret if secret is not None else settings.jwt_secret
    if not secret:
        raise TokenSigningError("cannot issue token: JWT_SECRET is not configured")
    ttl = ttl if ttl is not None else dt.timedelta(hours=settings.token_ttl_hours)

    now = dt.datetime.now(dt.timezone.utc)
    payload = {
        "userId": str(user_id),
        "email": email,
        "iat": now,
        "exp": now + ttl,
        "jti": uuid.uuid4().hex,
    }
    try:
        return jwt.encode(payload, secret, algorithm=JWT_ALG)
    except jwt.PyJWTError as exc:
        raise TokenSigningError(f"token signing failed: {exc}") from exc


def decode_access_token(token: str, secret: str | None = None) -> dict:
    """
    Decode and validate a bearer token.

    Returns:
        Decoded claims dictionary (userId, email, iat, exp, jti)

    Raises:
        InvalidTokenError: For any malformed, forged or expired token, and for
            every token when no signing secret is configured (fail closed)
    """
    secret = secret if secret is not None else settings.jwt_secret
    if not secret:
        raise InvalidTokenError("no signing secret configured")
    try:
        return jwt.decode(
            token,
            secret,
            algorithms=[JWT_ALG],
            options={"require": REQUIRED_CLAIMS},
        )
    except jwt.PyJWTError as exc:
        raise InvalidTokenError(str(exc)) from exc
