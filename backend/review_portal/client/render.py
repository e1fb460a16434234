# review_portal/client/render.py
"""
Markup helpers for the client.

All user-supplied text goes through sanitize() before it is placed in markup.
"""
import datetime as dt
import html
from typing import Any, Dict, Iterable

from .session import SessionState

MAX_STARS = 5
EMPTY_FEED_MESSAGE = "No reviews yet. Be the first to share your experience!"


def sanitize(value: Any) -> str:
    """Escape text for safe insertion into HTML (element content or attribute values)."""
    if value is None:
        return ""
    return html.escape(str(value), quote=True)


def safe_image_url(url: Any) -> str | None:
    """Return an escaped http(s) URL, or None for anything else (javascript:, data:, ...)."""
    if not isinstance(url, str):
        return None
    url = url.strip()
    if not url.lower().startswith(("http://", "https://")):
        return None
    return sanitize(url)


def render_stars(rating: Any) -> str:
    try:
        filled = int(rating)
    except (TypeError, ValueError):
        filled = 0
    filled = max(0, min(MAX_STARS, filled))
    return "★" * filled + "☆" * (MAX_STARS - filled)


def format_date(value: Any) -> str:
    if not isinstance(value, str) or not value:
        return ""
    try:
        parsed = dt.datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return sanitize(value)
    return parsed.date().isoformat()


def render_review_card(review: Dict[str, Any]) -> str:
    name = sanitize(review.get("name"))
    image = safe_image_url(review.get("image"))
    image_tag = f'<img src="{image}" alt="{name}">' if image else ""
    return (
        '<div class="review-card">'
        f'<div class="review-header">{image_tag}<h4>{name}</h4>'
        f'<div class="rating">{render_stars(review.get("rating"))}</div></div>'
        f'<p>{sanitize(review.get("description"))}</p>'
        f'<small>{format_date(review.get("createdAt"))}</small>'
        "</div>"
    )


def render_review_list(reviews: Iterable[Dict[str, Any]]) -> str:
    cards = [render_review_card(r) for r in reviews]
    if not cards:
        return f"<p>{EMPTY_FEED_MESSAGE}</p>"
    return "".join(cards)


def ui_visibility(state: SessionState) -> Dict[str, bool]:
    """
    Element id -> visible, derived only from the given session state.
    """
    signed_in = state.authenticated
    return {
        "loginLink": not signed_in,
        "registerLink": not signed_in,
        "logoutBtn": signed_in,
        "reviewForm": signed_in,
        "welcomeMessage": signed_in,
    }


def pagination_controls(current_page: int, total_pages: int) -> Dict[str, Any]:
    """State of the pager under the review feed."""
    total_pages = max(total_pages, 0)
    return {
        "previous": current_page > 1,
        "next": current_page < total_pages,
        "label": f"Page {current_page} of {max(total_pages, 1)}",
    }
