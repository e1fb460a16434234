# review_portal/models/review.py
"""
Database model for reviews.
A review is a short rated write-up owned by the user who submitted it.
"""
import uuid
from tortoise import fields, models

class Review(models.Model):
    """
    Review database model.

    Relationships:
    - Belongs to a User (many-to-one); the owner always comes from the
      verified token, never from the request body
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    user = fields.ForeignKeyField(
        "models.User",
        related_name="reviews",
        on_delete=fields.CASCADE
    )
    name = fields.CharField(max_length=100)  # Display name shown on the card
    image = fields.CharField(max_length=1024, null=True)  # Optional image URL
    description = fields.TextField()  # Bounded in the API layer
    rating = fields.SmallIntField()  # 1..5 inclusive
    created_at = fields.DatetimeField(auto_now_add=True, index=True)

    class Meta:
        table = "reviews"
