# review_portal/schemas/review.py
"""
Pydantic schemas for review endpoints.
Defines request/response models for review submission and the paginated feed.
"""
from typing import List, Optional
from pydantic import BaseModel, HttpUrl, field_validator

__all__ = ["ReviewCreateRequest", "ReviewOut", "ReviewCreatedResponse", "ReviewListOut"]

class ReviewCreateRequest(BaseModel):
    """
    Request model for submitting a review.
    The owner is never part of the body; it comes from the bearer token.
    """
    name: Optional[str] = None  # Display name shown on the card
    image: Optional[HttpUrl] = None  # Optional http(s) image URL ("" means no image)
    description: Optional[str] = None  # Review text
    rating: Optional[int] = None  # 1..5 inclusive; numeric strings from forms are accepted

    @field_validator("image", mode="before")
    @classmethod
    def blank_image_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("rating", mode="before")
    @classmethod
    def rating_is_not_bool(cls, value):
        # Lax int parsing would turn true into a 1-star rating
        if isinstance(value, bool):
            raise ValueError("rating must be an integer")
        return value

class ReviewOut(BaseModel):
    """
    Review item returned by the API.
    """
    id: str  # Review unique identifier
    userId: str  # Owner identifier
    author: Optional[str] = None  # Owner's display name
    name: str
    image: Optional[str] = None
    description: str
    rating: int
    createdAt: str  # ISO timestamp (UTC)

class ReviewCreatedResponse(BaseModel):
    message: str
    review: ReviewOut

class ReviewListOut(BaseModel):
    """
    Response model for the paginated review feed (newest first).
    """
    reviews: List[ReviewOut]
    currentPage: int
    totalPages: int
    totalReviews: int
