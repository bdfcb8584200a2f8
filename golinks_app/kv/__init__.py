"""
Key-value store module for short-links.
Implements Strategy Pattern for flexible store backends.
"""

from .strategies import KVStore, KVStoreError, RedisKVStore, InMemoryKVStore
from .factory import KVStoreFactory, KVBackend

__all__ = [
    "KVStore",
    "KVStoreError",
    "RedisKVStore",
    "InMemoryKVStore",
    "KVStoreFactory",
    "KVBackend",
]
