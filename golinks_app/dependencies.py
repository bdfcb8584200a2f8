"""
Dependencies shared by the admin API and the Discord bot.

This module provides singleton instances of the key-value store and the
audit notifier. FastAPI routes receive them through Depends(); the bot
receives them once at startup and passes them to every command call.
"""

from functools import lru_cache

from fastapi import Header, HTTPException, status

from golinks_app.config import settings
from golinks_app.kv.factory import KVStoreFactory, KVBackend
from golinks_app.kv.strategies import KVStore
from golinks_app.notifications.webhook import AuditNotifier, NullNotifier, WebhookNotifier


@lru_cache()
def get_store() -> KVStore:
    """
    Get key-value store instance (singleton).

    Factory gets config from settings internally.
    @lru_cache ensures this is called only once.
    """
    backend = KVBackend(settings.kv_backend)
    return KVStoreFactory.create(backend)


@lru_cache()
def get_notifier() -> AuditNotifier:
    """
    Get audit notifier instance (singleton).

    Posts to the internal logs webhook when one is configured,
    otherwise audit messages only go to the application log.
    """
    if settings.internal_logs_webhook:
        return WebhookNotifier(settings.internal_logs_webhook, timeout=settings.webhook_timeout)
    return NullNotifier()


def get_allowed_domains() -> tuple:
    return tuple(settings.domain_allowlist)


def require_access_key(authorization: str = Header(default="")) -> None:
    """
    Check the admin API bearer key.

    An unset access key disables the API instead of leaving it open.
    """
    if not settings.access_key:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error"
        )
    if authorization != f"Bearer {settings.access_key}":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="This maze wasn't meant for you"
        )
