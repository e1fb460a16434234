# review_portal/api/routers/reviews.py
import datetime as dt
import logging
import math

from fastapi import APIRouter, Depends, Query, status

from review_portal.api.deps import Identity, get_current_identity
from review_portal.core.errors import ValidationError
from review_portal.models.review import Review
from review_portal.schemas.review import (
    ReviewCreateRequest,
    ReviewCreatedResponse,
    ReviewListOut,
    ReviewOut,
)

logger = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/reviews", tags=["reviews"])

MIN_RATING = 1
MAX_RATING = 5
NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 2000
IMAGE_MAX_LENGTH = 1024


def _iso(ts: dt.datetime) -> str:
    # Naive values from the store are UTC
    if ts.tzinfo is None:
        return ts.isoformat() + "Z"
    return ts.astimezone(dt.timezone.utc).isoformat().replace("+00:00", "Z")


def review_to_out(r: Review) -> ReviewOut:
    """Convert a Review (with its user already fetched) to the API shape."""
    return ReviewOut(
        id=str(r.id),
        userId=str(r.user_id),
        author=r.user.name,
        name=r.name,
        image=r.image,
        description=r.description,
        rating=r.rating,
        createdAt=_iso(r.created_at),
    )


def validate_review(body: ReviewCreateRequest) -> dict:
    """
    Check a review submission and return the cleaned field values.

    Raises:
        ValidationError: naming the first offending field
    """
    name = (body.name or "").strip()
    description = (body.description or "").strip()
    image = str(body.image) if body.image is not None else None

    if not name:
        raise ValidationError("name is required")
    if len(name) > NAME_MAX_LENGTH:
        raise ValidationError(f"name must be at most {NAME_MAX_LENGTH} characters")
    if not description:
        raise ValidationError("description is required")
    if len(description) > DESCRIPTION_MAX_LENGTH:
        raise ValidationError(f"description must be at most {DESCRIPTION_MAX_LENGTH} characters")
    if body.rating is None:
        raise ValidationError("rating is required")
    if not MIN_RATING <= body.rating <= MAX_RATING:
        raise ValidationError(f"rating must be between {MIN_RATING} and {MAX_RATING}")
    if image is not None and len(image) > IMAGE_MAX_LENGTH:
        raise ValidationError(f"image must be at most {IMAGE_MAX_LENGTH} characters")

    return {"name": name, "description": description, "image": image, "rating": body.rating}


@router.post("", response_model=ReviewCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_review(body: ReviewCreateRequest, identity: Identity = Depends(get_current_identity)):
    """
    Submit a review as the authenticated user.

    The owner is always the user named in the verified token; any owner field
    a client might send is ignored.

    Returns:
        ReviewCreatedResponse: message and the created review (with author name)

    Raises:
        ValidationError (400): Missing/oversized fields or rating outside 1..5
        UnauthorizedError (401) / ForbiddenError (403): from the auth dependency
    """
    fields = validate_review(body)
    review = await Review.create(user_id=identity.user_id, **fields)
    await review.fetch_related("user")
    logger.info("[reviews] user id=%s submitted review id=%s", identity.user_id, review.id)
    return ReviewCreatedResponse(message="Review submitted successfully", review=review_to_out(review))


@router.get("", response_model=ReviewListOut)
async def list_reviews(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
):
    """
    Public, paginated review feed ordered by creation time (newest first).

    Args:
        page: 1-based page number
        limit: Page size (1-100)

    Returns:
        ReviewListOut: reviews, currentPage, totalPages (ceil(total/limit)), totalReviews
    """
    total = await Review.all().count()
    rows = (
        await Review.all()
        .select_related("user")
        .order_by("-created_at")
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return ReviewListOut(
        reviews=[review_to_out(r) for r in rows],
        currentPage=page,
        totalPages=math.ceil(total / limit),
        totalReviews=total,
    )
