"""
Key-value store strategies using Strategy Pattern.
Allows switching between different store backends (Redis, In-Memory).
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional
import re

from redis.exceptions import RedisError


class KVStoreError(Exception):
    """A store operation (put, delete, ...) failed"""


class KVStore(ABC):
    """
    Abstract base class for key-value stores.

    This is the Strategy Pattern interface - short-link code talks to this
    contract only, so the backend can be swapped by configuration.

    Values are plain strings. Operations that fail raise KVStoreError.
    All methods are async because store operations involve I/O (network for Redis).
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """
        Get the value stored under a key.

        Args:
            key: Store key

        Returns:
            Stored value or None if the key is absent
        """
        pass

    @abstractmethod
    async def put(self, key: str, value: str) -> None:
        """
        Store a value, replacing any previous value.

        Args:
            key: Store key
            value: Value to store
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """
        Delete a key. Deleting an absent key is not an error.

        Args:
            key: Store key
        """
        pass

    @abstractmethod
    async def list_keys(self, prefix: Optional[str] = None) -> List[str]:
        """
        List key names, optionally only those starting with a prefix.

        Args:
            prefix: Only return keys starting with this string

        Returns:
            Key names in lexicographic order
        """
        pass


_GLOB_SPECIAL = re.compile(r"([\\*?\[\]])")


def _escape_glob(text: str) -> str:
    """Escape Redis MATCH glob metacharacters"""
    return _GLOB_SPECIAL.sub(r"\\\1", text)


class RedisKVStore(KVStore):
    """
    Redis store implementation with async operations.

    Every key is namespaced with `key_prefix` so the short-links can share
    a Redis database with other data. The prefix is added on the way in and
    stripped on the way out; callers never see it.
    """

    def __init__(self, redis_client, key_prefix: str = ""):
        """
        Initialize Redis store.

        Args:
            redis_client: redis.asyncio.Redis client created with decode_responses=True
            key_prefix: Namespace prepended to every key
        """
        self.redis = redis_client
        self.key_prefix = key_prefix

    def _full_key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    async def get(self, key: str) -> Optional[str]:
        try:
            value = await self.redis.get(self._full_key(key))
        except RedisError as e:
            raise KVStoreError(f"Redis get failed for {key!r}: {e}") from e
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return value

    async def put(self, key: str, value: str) -> None:
        try:
            await self.redis.set(self._full_key(key), value)
        except RedisError as e:
            raise KVStoreError(f"Redis put failed for {key!r}: {e}") from e

    async def delete(self, key: str) -> None:
        try:
            await self.redis.delete(self._full_key(key))
        except RedisError as e:
            raise KVStoreError(f"Redis delete failed for {key!r}: {e}") from e

    async def list_keys(self, prefix: Optional[str] = None) -> List[str]:
        pattern = _escape_glob(self._full_key(prefix or "")) + "*"
        names = set()
        try:
            # SCAN may yield a key more than once
            async for name in self.redis.scan_iter(match=pattern):
                if isinstance(name, bytes):
                    name = name.decode("utf-8")
                names.add(name[len(self.key_prefix):])
        except RedisError as e:
            raise KVStoreError(f"Redis list failed for prefix {prefix!r}: {e}") from e
        return sorted(names)

    async def close(self) -> None:
        """Close the underlying connection pool"""
        await self.redis.aclose()


class InMemoryKVStore(KVStore):
    """
    In-memory store implementation using Python dict.

    Pros:
    - Very fast (no network overhead)
    - Simple (no external dependencies)
    - Good for development and testing

    Cons:
    - Not shared between processes (the bot and the API each get their own)
    - Lost on restart

    Note: Async for interface consistency, but operations are instant.
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        """Initialize in-memory store, optionally pre-populated"""
        self._data: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def put(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def list_keys(self, prefix: Optional[str] = None) -> List[str]:
        return sorted(k for k in self._data if k.startswith(prefix or ""))
