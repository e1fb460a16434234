# review_portal/api/routers/auth.py
import logging

from fastapi import APIRouter, Depends, status
from tortoise.exceptions import IntegrityError

from review_portal.api.deps import Identity, get_current_identity
from review_portal.core.errors import ConflictError, UnauthorizedError, ValidationError
from review_portal.core.revocation import denylist
from review_portal.core.security import (
    PasswordPolicyError,
    check_password_policy,
    create_access_token,
    dummy_password_hash,
    hash_password,
    verify_password,
)
from review_portal.models.user import User
from review_portal.schemas.auth import (
    AuthResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    VerifyResponse,
)

logger = logging.getLogger("uvicorn.error")

router = APIRouter(tags=["auth"])

NAME_MAX_LENGTH = 100
INVALID_CREDENTIALS = "Invalid credentials"


def normalize_email(raw_email: str | None) -> str:
    """Normalize an email string by stripping whitespace and lowering case."""
    return (raw_email or "").strip().lower()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(body: RegisterRequest):
    """
    Register a new user account and sign them in.

    Args:
        body: Request body containing:
            - name: str (display name)
            - email: str (normalised to lowercase, must be unique)
            - password: str (at least 6 characters, hashed before storage)

    Returns:
        AuthResponse: token, userId, name and a message (201)

    Raises:
        ValidationError (400): Missing field, bad email format or short password
        ConflictError (409): Email already registered
    """
    name = (body.name or "").strip()
    email = normalize_email(body.email)
    password = body.password or ""

    if not name or not email or not password:
        raise ValidationError("Name, email and password are required")
    if len(name) > NAME_MAX_LENGTH:
        raise ValidationError(f"Name must be at most {NAME_MAX_LENGTH} characters")
    try:
        check_password_policy(password)
    except PasswordPolicyError as exc:
        raise ValidationError(str(exc))

    # Existence is reported on purpose; see DESIGN.md
    if await User.filter(email=email).exists():
        raise ConflictError("User already exists")

    try:
        user = await User.create(
            name=name,
            email=email,
            password_hash=hash_password(password),
        )
    except IntegrityError:
        # Lost a race against a concurrent registration of the same email
        raise ConflictError("User already exists")

    token = create_access_token(str(user.id), user.email)
    logger.info("[auth] registered user id=%s", user.id)
    return AuthResponse(token=token, userId=str(user.id), name=user.name,
                        message="Registration successful")


@router.post("/login", response_model=AuthResponse)
async def login(body: LoginRequest):
    """
    Authenticate a user and issue a bearer token.

    Unknown email and wrong password produce the same 401 message so the
    response does not tell the two apart.

    Raises:
        ValidationError (400): Missing email or password
        UnauthorizedError (401): Invalid credentials
    """
    email = normalize_email(body.email)
    password = body.password or ""
    if not email or not password:
        raise ValidationError("Email and password are required")

    user = await User.get_or_none(email=email)
    # Unknown emails still pay for one Argon2 check
    stored_hash = user.password_hash if user is not None else dummy_password_hash()
    password_ok = verify_password(password, stored_hash)
    if user is None or not password_ok:
        logger.info("[auth] failed login attempt")
        raise UnauthorizedError(INVALID_CREDENTIALS)

    token = create_access_token(str(user.id), user.email)
    logger.info("[auth] login user id=%s", user.id)
    return AuthResponse(token=token, userId=str(user.id), name=user.name,
                        message="Login successful")


@router.get("/verify", response_model=VerifyResponse)
async def verify(identity: Identity = Depends(get_current_identity)):
    """
    Check that the presented bearer token is still valid.

    Returns:
        VerifyResponse: valid=True and the token's claims (userId, email, iat, exp)
    """
    claims = {k: v for k, v in identity.claims.items() if k != "jti"}
    return VerifyResponse(valid=True, user=claims)


@router.post("/logout", response_model=MessageResponse)
async def logout(identity: Identity = Depends(get_current_identity)):
    """
    Revoke the presented token until it would have expired.

    The client drops its stored session regardless of this call; revocation
    only makes a leaked copy of the token useless.
    """
    denylist.revoke(identity.claims.get("jti"), float(identity.claims["exp"]))
    return MessageResponse(message="Logged out")
