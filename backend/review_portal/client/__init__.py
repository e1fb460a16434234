# review_portal/client/__init__.py
"""
Client-side session management for the Review Portal API.

- api: ReviewPortalClient (HTTP calls, errors)
- retry: RetryPolicy and the retrying send loop
- storage: token/user persistence with an in-memory fallback
- session: SessionState and SessionManager (page loads, login/logout)
- render: sanitising markup helpers and UI visibility toggles
"""
from .api import ApiError, ClientError, NetworkError, ReviewPortalClient
from .retry import RetryPolicy
from .session import PageLoad, SessionManager, SessionState
from .storage import FileStorage, MemoryStorage, SessionStorage

__all__ = [
    "ApiError",
    "ClientError",
    "NetworkError",
    "ReviewPortalClient",
    "RetryPolicy",
    "PageLoad",
    "SessionManager",
    "SessionState",
    "FileStorage",
    "MemoryStorage",
    "SessionStorage",
]
