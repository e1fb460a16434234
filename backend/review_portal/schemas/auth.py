# review_portal/schemas/auth.py
"""
Pydantic schemas for authentication endpoints.
Defines request/response models for registration, login and token checks.

Request fields are optional at the schema level so that missing values reach
the handler and are reported as a 400 with a readable message.
"""
from pydantic import BaseModel, EmailStr, field_validator

__all__ = ["RegisterRequest", "LoginRequest", "AuthResponse", "VerifyResponse", "MessageResponse"]

class RegisterRequest(BaseModel):
    """
    Request model for account registration.
    """
    name: str | None = None  # Display name
    email: EmailStr | None = None  # Login email, format-checked (lowercased server-side)
    password: str | None = None  # Plain text, hashed server-side, min 6 characters

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, value):
        # Blank emails fall through to the handler's "required" message
        if isinstance(value, str):
            return value.strip() or None
        return value

class LoginRequest(BaseModel):
    """
    Request model for user login endpoint.
    Contains credentials for authentication.
    """
    email: str | None = None
    password: str | None = None

class AuthResponse(BaseModel):
    """
    Response model for successful registration or login.
    Returns the bearer token and the public identity of the user.
    """
    token: str  # Signed bearer token for the Authorization header
    userId: str  # User unique identifier
    name: str  # Display name
    message: str

class VerifyResponse(BaseModel):
    """Response model for token verification: the claims carried by the token."""
    valid: bool
    user: dict

class MessageResponse(BaseModel):
    message: str
