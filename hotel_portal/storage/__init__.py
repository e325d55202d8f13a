"""Persisted token storage."""

from hotel_portal.storage.token_store import (
    FileTokenStore,
    MemoryTokenStore,
    RedisTokenStore,
    TokenStore,
    TokenStoreError,
    build_token_store,
)

__all__ = [
    "TokenStore",
    "TokenStoreError",
    "MemoryTokenStore",
    "FileTokenStore",
    "RedisTokenStore",
    "build_token_store",
]
