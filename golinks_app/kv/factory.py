"""
Factory for creating key-value store instances.
Simple, clean factory with singleton caching.
"""

from enum import Enum
import logging

from .strategies import KVStore, RedisKVStore, InMemoryKVStore
from golinks_app.config import settings

logger = logging.getLogger(__name__)


class KVBackend(Enum):
    """Available key-value store backends"""
    REDIS = "redis"
    MEMORY = "memory"


class KVStoreFactory:
    """
    Simple factory for creating key-value store instances.

    Uses Singleton Pattern - creates instance once, reuses it.
    Gets configuration from settings (not passed as parameters).
    """

    _instance: KVStore = None  # Single cached instance

    @classmethod
    def create(cls, backend: KVBackend) -> KVStore:
        """
        Create or return cached store instance.

        Args:
            backend: Type of store backend (from enum)

        Returns:
            Singleton store instance
        """
        # Return cached instance if exists
        if cls._instance is not None:
            return cls._instance

        if backend == KVBackend.REDIS:
            import redis.asyncio as aioredis

            # Connections are opened lazily on first command
            redis_client = aioredis.from_url(
                settings.redis_url,
                decode_responses=True,
                socket_connect_timeout=2,
                socket_timeout=2,
            )
            cls._instance = RedisKVStore(redis_client, key_prefix=settings.redis_key_prefix)
            logger.info("✅ Redis key-value store initialized (prefix %r)", settings.redis_key_prefix)

        elif backend == KVBackend.MEMORY:
            cls._instance = InMemoryKVStore()
            logger.info("✅ In-memory key-value store initialized")

        else:
            raise ValueError(f"Unknown key-value backend: {backend}")

        return cls._instance

    @classmethod
    def clear_instance(cls):
        """Clear cached instance (for testing)"""
        cls._instance = None
