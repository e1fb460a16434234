# review_portal/client/storage.py
"""
Client-side persistence for the session token and user.

SessionStorage writes to a primary persistent store (a JSON file) and falls
back to an in-process store when the primary is unavailable (read-only home
directory, full disk, ...). Once the fallback is in use it stays in use for
the lifetime of the SessionStorage object.
"""
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger("review_portal.client")

TOKEN_KEY = "token"
USER_KEY = "user"


class MemoryStorage:
    """Key-value store kept in process memory."""

    def __init__(self):
        self._data: Dict[str, Any] = {}

    def get(self, key: str) -> Any:
        return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def set_many(self, values: Dict[str, Any]) -> None:
        self._data.update(values)

    def remove_many(self, keys) -> None:
        for key in keys:
            self._data.pop(key, None)


class FileStorage:
    """
    Key-value store persisted as a single JSON document.

    Raises OSError when the file cannot be read or written; a corrupt file is
    treated as empty.
    """

    def __init__(self, path: str | os.PathLike):
        self.path = Path(path)

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except ValueError:
            # Undecodable bytes or broken JSON
            logger.warning("[storage] %s is not valid UTF-8 JSON, starting empty", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def _dump(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data), encoding="utf-8")
        os.replace(tmp, self.path)

    def get(self, key: str) -> Any:
        return self._load().get(key)

    def set(self, key: str, value: Any) -> None:
        data = self._load()
        data[key] = value
        self._dump(data)

    def remove(self, key: str) -> None:
        self.remove_many([key])

    def set_many(self, values: Dict[str, Any]) -> None:
        """Write several keys in one document replace."""
        data = self._load()
        data.update(values)
        self._dump(data)

    def remove_many(self, keys) -> None:
        data = self._load()
        present = [key for key in keys if key in data]
        if present:
            for key in present:
                del data[key]
            self._dump(data)


def default_session_path() -> Path:
    return Path(os.getenv("REVIEW_PORTAL_SESSION_FILE", Path.home() / ".review_portal" / "session.json"))


class SessionStorage:
    """
    Holds the bearer token and the signed-in user (id, name).

    Args:
        primary: Persistent store; any OSError switches to `fallback`
        fallback: Secondary store (in-memory by default)
    """

    def __init__(self, primary=None, fallback=None):
        self.primary = primary if primary is not None else FileStorage(default_session_path())
        self.fallback = fallback if fallback is not None else MemoryStorage()
        self._degraded = False

    @property
    def using_fallback(self) -> bool:
        return self._degraded

    def _store(self):
        return self.fallback if self._degraded else self.primary

    def _degrade(self, exc: OSError) -> None:
        if not self._degraded:
            logger.warning("[storage] primary store unavailable (%s); using fallback", exc)
        self._degraded = True

    def _get(self, key: str) -> Any:
        try:
            return self._store().get(key)
        except OSError as exc:
            self._degrade(exc)
            return self.fallback.get(key)

    def _set_many(self, values: Dict[str, Any]) -> None:
        try:
            self._store().set_many(values)
        except OSError as exc:
            self._degrade(exc)
            self.fallback.set_many(values)

    def _remove_many(self, keys) -> None:
        try:
            self._store().remove_many(keys)
        except OSError as exc:
            self._degrade(exc)
        self.fallback.remove_many(keys)

    def get_token(self) -> Optional[str]:
        return self._get(TOKEN_KEY)

    def get_user(self) -> Optional[Dict[str, Any]]:
        user = self._get(USER_KEY)
        return user if isinstance(user, dict) else None

    def save(self, token: str, user: Dict[str, Any]) -> None:
        # Token and user are written together; a store never holds one without the other
        self._set_many({TOKEN_KEY: token, USER_KEY: user})

    def clear(self) -> None:
        self._remove_many([TOKEN_KEY, USER_KEY])
