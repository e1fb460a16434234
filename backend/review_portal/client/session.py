# review_portal/client/session.py
"""
Client session manager.

The session (token + user) lives only in SessionStorage. Every page load
rebuilds a SessionState value from storage and hands it to whatever renders
the page, so no module-level "current user" exists.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Optional

from .api import ApiError, ClientError, ReviewPortalClient
from .storage import SessionStorage

logger = logging.getLogger("review_portal.client")

PROTECTED_PAGES = frozenset({"home", "service", "review"})
LOGIN_PAGE = "login"


@dataclass(frozen=True)
class SessionState:
    """Snapshot of the client session at one point in time."""
    token: Optional[str] = None
    user: Optional[Dict[str, Any]] = None

    @property
    def authenticated(self) -> bool:
        return bool(self.token)

    @property
    def user_name(self) -> Optional[str]:
        return (self.user or {}).get("name")

    @classmethod
    def from_storage(cls, storage: SessionStorage) -> "SessionState":
        return cls(token=storage.get_token(), user=storage.get_user())


@dataclass(frozen=True)
class PageLoad:
    """Outcome of loading a page: the session to render with, and where to go instead (if anywhere)."""
    page: str
    state: SessionState
    redirect: Optional[str] = None


def normalize_page(page: str) -> str:
    """Map "/home", "home.html" or "home" to "home"."""
    name = (page or "").strip().strip("/").rsplit("/", 1)[-1]
    if name.endswith(".html"):
        name = name[: -len(".html")]
    return name or "index"


@dataclass
class SessionManager:
    """
    Ties the API client to session storage.

    Attributes:
        client: API client (carries the retry policy)
        storage: Where the token and user are persisted
        protected_pages: Pages that require a verified session
    """
    client: ReviewPortalClient
    storage: SessionStorage = field(default_factory=SessionStorage)
    protected_pages: FrozenSet[str] = PROTECTED_PAGES
    login_page: str = LOGIN_PAGE

    def current_state(self) -> SessionState:
        return SessionState.from_storage(self.storage)

    def _store_auth(self, data: Dict[str, Any]) -> SessionState:
        user = {"id": data["userId"], "name": data["name"]}
        self.storage.save(data["token"], user)
        return SessionState(token=data["token"], user=user)

    def _drop_session(self) -> SessionState:
        self.storage.clear()
        return SessionState()

    async def load_page(self, page: str) -> PageLoad:
        """
        Recompute the session for `page` and verify it with the server.

        - protected page, no token           -> redirect to login
        - token rejected by server (401/403) -> session cleared; redirect if protected
        - server unreachable after retries   -> keep the stored session
        """
        name = normalize_page(page)
        protected = name in self.protected_pages
        state = self.current_state()

        if not state.authenticated:
            return PageLoad(name, state, self.login_page if protected else None)

        try:
            await self.client.verify(state.token)
        except ApiError as exc:
            if exc.is_auth_failure:
                logger.info("[session] stored token rejected (HTTP %d); signing out", exc.status_code)
                state = self._drop_session()
                return PageLoad(name, state, self.login_page if protected else None)
            logger.error("[session] token verification failed: %s", exc.message)
        except ClientError as exc:
            logger.error("[session] token verification failed: %s", exc.message)
        return PageLoad(name, state)

    async def register(self, name: str, email: str, password: str) -> SessionState:
        return self._store_auth(await self.client.register(name, email, password))

    async def login(self, email: str, password: str) -> SessionState:
        return self._store_auth(await self.client.login(email, password))

    async def logout(self) -> SessionState:
        """Forget the session locally and ask the server to revoke the token."""
        token = self.storage.get_token()
        state = self._drop_session()
        if token:
            try:
                await self.client.logout(token)
            except ClientError as exc:
                # Local sign-out already happened; the token still expires on its own
                logger.warning("[session] server-side logout failed: %s", exc.message)
        return state

    async def submit_review(
        self,
        name: str,
        description: str,
        rating: int,
        image: Optional[str] = None,
    ) -> Dict[str, Any]:
        state = self.current_state()
        if not state.authenticated:
            raise ClientError("Please log in to submit a review")
        try:
            return await self.client.submit_review(state.token, name, description, rating, image=image)
        except ApiError as exc:
            if exc.is_auth_failure:
                self._drop_session()
            raise

    async def load_reviews(self, page: int = 1, limit: int = 10) -> Dict[str, Any]:
        return await self.client.list_reviews(page=page, limit=limit)
