# review_portal/models/user.py
"""
Database model for users.
Represents a registered account: display name, login email and password hash.
"""
import uuid
from tortoise import fields, models

class User(models.Model):
    """
    User database model.

    Relationships:
    - Has many Reviews (one-to-many, via related_name="reviews")

    Security:
    - Password is stored as a hash (never store plain text passwords)
    - Email is stored lowercased and must be unique across all users
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)  # Primary key: unique user identifier
    name = fields.CharField(max_length=100)  # Display name
    email = fields.CharField(
        max_length=256,
        unique=True,
        index=True
    )  # Login email (normalised to lowercase, unique, indexed for fast lookups)
    password_hash = fields.CharField(max_length=255)  # Argon2 hash, never plain text
    created_at = fields.DatetimeField(auto_now_add=True)  # Timestamp when account was created

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "users"  # Database table name
