# review_portal/core/revocation.py
"""
Token revocation denylist.

Tokens are stateless, so logging out only works if the server remembers the
token ids (jti) it must refuse. Each entry lives until the token would have
expired anyway and is pruned lazily after that.
"""
import logging
import time
from typing import Callable, Dict

logger = logging.getLogger("uvicorn.error")


class TokenDenylist:
    """
    In-process set of revoked token ids keyed to their expiry.

    Data structure:
    - _entries: Dict[jti, exp_unix_seconds]
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._entries: Dict[str, float] = {}
        self._clock = clock

    def revoke(self, jti: str, expires_at: float) -> None:
        """
        Refuse the token `jti` until `expires_at` (unix seconds).
        Already-expired tokens are not stored.
        """
        if not jti:
            return
        self.prune()
        if expires_at <= self._clock():
            return
        self._entries[jti] = expires_at
        logger.info("[revocation] token revoked jti=%s", jti)

    def is_revoked(self, jti: str | None) -> bool:
        if not jti:
            return False
        expires_at = self._entries.get(jti)
        if expires_at is None:
            return False
        if expires_at <= self._clock():
            # Expired tokens fail signature checks on their own
            self._entries.pop(jti, None)
            return False
        return True

    def prune(self) -> int:
        """Drop every entry whose token has expired; returns how many were dropped."""
        now = self._clock()
        expired = [jti for jti, exp in self._entries.items() if exp <= now]
        for jti in expired:
            del self._entries[jti]
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        self._entries.clear()


denylist = TokenDenylist()  # Shared process-wide instance
