"""Bearer token persistence under a single well-known key."""

import json
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

import redis
from structlog import get_logger

from hotel_portal.config import Settings, settings as default_settings
from hotel_portal.config.settings import RedisSettings

logger = get_logger(__name__)


class TokenStoreError(Exception):
    """Raised when the token cannot be persisted or removed."""

    pass


class TokenStore(ABC):
    """Synchronous key/value store holding the bearer token.

    Writes are synchronous so the session can update memory and storage
    in the same step.
    """

    def __init__(self, key: str = "token"):
        self.key = key

    @abstractmethod
    def get(self) -> Optional[str]:
        """Return the persisted token, or None."""

    @abstractmethod
    def set(self, token: str) -> None:
        """Persist the token."""

    @abstractmethod
    def delete(self) -> None:
        """Remove the persisted token. Removing a missing token is a no-op."""


class MemoryTokenStore(TokenStore):
    """Process-local store, used for tests and one-shot runs."""

    def __init__(self, key: str = "token", token: Optional[str] = None):
        super().__init__(key)
        self._values: dict[str, str] = {}
        if token:
            self._values[key] = token

    def get(self) -> Optional[str]:
        return self._values.get(self.key)

    def set(self, token: str) -> None:
        self._values[self.key] = token

    def delete(self) -> None:
        self._values.pop(self.key, None)


class FileTokenStore(TokenStore):
    """JSON file holding a flat key/value mapping, like browser localStorage.

    Other keys in the file are preserved on write.
    """

    def __init__(self, path: str | Path, key: str = "token"):
        super().__init__(key)
        self.path = Path(path).expanduser()

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Token storage file unreadable, ignoring", path=str(self.path), error=str(e))
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise TokenStoreError(f"Failed to write token storage at {self.path}: {e}") from e

    def get(self) -> Optional[str]:
        token = self._read_all().get(self.key)
        return token if isinstance(token, str) and token else None

    def set(self, token: str) -> None:
        data = self._read_all()
        data[self.key] = token
        self._write_all(data)

    def delete(self) -> None:
        data = self._read_all()
        if self.key not in data:
            return
        del data[self.key]
        self._write_all(data)


class RedisTokenStore(TokenStore):
    """Token shared through Redis, for several clients acting as one user."""

    def __init__(
        self,
        client: Optional[redis.Redis] = None,
        key: str = "token",
        redis_settings: Optional[RedisSettings] = None,
    ):
        super().__init__(key)
        redis_settings = redis_settings or default_settings.redis
        self.redis_client = client or redis.Redis(
            host=redis_settings.host,
            port=redis_settings.port,
            db=redis_settings.db,
            password=redis_settings.password,
            ssl=redis_settings.ssl,
            decode_responses=True,
            socket_timeout=redis_settings.socket_timeout,
            socket_connect_timeout=redis_settings.socket_connect_timeout,
        )

    def get(self) -> Optional[str]:
        """Get token from Redis.

        Returns:
            Cached token if available, None otherwise (including when Redis is down)
        """
        try:
            token = self.redis_client.get(self.key)
            return token if token else None
        except redis.RedisError as e:
            logger.warning("Redis get operation failed", error=str(e))
            return None

    def set(self, token: str) -> None:
        try:
            self.redis_client.set(self.key, token)
        except redis.RedisError as e:
            raise TokenStoreError(f"Failed to store token in Redis: {e}") from e

    def delete(self) -> None:
        try:
            self.redis_client.delete(self.key)
        except redis.RedisError as e:
            raise TokenStoreError(f"Failed to remove token from Redis: {e}") from e

    def close(self) -> None:
        """Close Redis connection."""
        try:
            self.redis_client.close()
            logger.debug("Closed Redis connection")
        except redis.RedisError as e:
            logger.warning("Error closing Redis connection", error=str(e))


def build_token_store(config: Optional[Settings] = None) -> TokenStore:
    """Create the token store selected by settings.

    Args:
        config: Settings to read; defaults to the global settings

    Returns:
        Configured TokenStore
    """
    config = config or default_settings
    store_settings = config.token_store

    if store_settings.backend == "memory":
        return MemoryTokenStore(key=store_settings.key)
    if store_settings.backend == "redis":
        return RedisTokenStore(key=store_settings.key, redis_settings=config.redis)
    return FileTokenStore(store_settings.path, key=store_settings.key)
