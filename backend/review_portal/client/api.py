# review_portal/client/api.py
"""
HTTP client for the Review Portal API.

Every call goes through send_with_retry, so transient failures (5xx, network)
are retried according to the client's RetryPolicy and 4xx responses surface
immediately as ApiError.
"""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx

from .retry import RetryPolicy, send_with_retry

logger = logging.getLogger("review_portal.client")


class ClientError(Exception):
    """Base class for client-visible failures; `message` is short and human-readable."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ApiError(ClientError):
    """The server answered with an error status or a body that is not JSON."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        super().__init__(message)

    @property
    def is_auth_failure(self) -> bool:
        return self.status_code in (401, 403)


class NetworkError(ClientError):
    """The server could not be reached after all retries."""


def _error_message(response: httpx.Response, fallback: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict) and isinstance(body.get("error"), str):
        return body["error"]
    return fallback


class ReviewPortalClient:
    """
    Async API client.

    Args:
        base_url: Server origin, e.g. "http://localhost:3000"
        retry_policy: Retry behaviour for every request
        transport: Optional httpx transport (tests use ASGITransport/MockTransport)
        timeout: Per-request timeout in seconds
        sleep: Awaitable used between retries
    """

    def __init__(
        self,
        base_url: str,
        retry_policy: RetryPolicy | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.retry_policy = retry_policy or RetryPolicy()
        self._sleep = sleep
        self._http = httpx.AsyncClient(base_url=base_url.rstrip("/"), transport=transport, timeout=timeout)

    async def __aenter__(self) -> "ReviewPortalClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        token: Optional[str] = None,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        failure_message: str = "Request failed",
    ) -> Dict[str, Any]:
        headers = {"Authorization": f"Bearer {token}"} if token else {}

        async def send() -> httpx.Response:
            return await self._http.request(method, path, headers=headers, json=json, params=params)

        try:
            response = await send_with_retry(send, self.retry_policy, sleep=self._sleep)
        except httpx.TransportError as exc:
            raise NetworkError("Network error. Please try again.") from exc

        if response.is_error:
            raise ApiError(response.status_code, _error_message(response, failure_message))
        try:
            return response.json()
        except ValueError:
            # e.g. an HTML page from a proxy answering 200
            logger.warning("[client] %s %s returned a non-JSON body", method, path)
            raise ApiError(response.status_code, failure_message)

    async def register(self, name: str, email: str, password: str) -> Dict[str, Any]:
        return await self._request(
            "POST", "/api/register",
            json={"name": name, "email": email, "password": password},
            failure_message="Registration failed",
        )

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        return await self._request(
            "POST", "/api/login",
            json={"email": email, "password": password},
            failure_message="Login failed",
        )

    async def verify(self, token: str) -> Dict[str, Any]:
        return await self._request("GET", "/api/verify", token=token,
                                   failure_message="Token verification failed")

    async def logout(self, token: str) -> Dict[str, Any]:
        return await self._request("POST", "/api/logout", token=token, failure_message="Logout failed")

    async def submit_review(
        self,
        token: str,
        name: str,
        description: str,
        rating: int,
        image: Optional[str] = None,
    ) -> Dict[str, Any]:
        return await self._request(
            "POST", "/api/reviews", token=token,
            json={"name": name, "image": image, "description": description, "rating": rating},
            failure_message="Failed to submit review",
        )

    async def list_reviews(self, page: int = 1, limit: int = 10) -> Dict[str, Any]:
        return await self._request(
            "GET", "/api/reviews", params={"page": page, "limit": limit},
            failure_message="Failed to load reviews",
        )

    async def health(self) -> Dict[str, Any]:
        return await self._request("GET", "/health", failure_message="Health check failed")
