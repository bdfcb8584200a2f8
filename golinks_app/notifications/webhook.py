"""
Audit notifications for short-link changes.

Create and delete post a one-line audit message to an internal logs
webhook. Delivery is best effort: failures are logged, never raised.
"""

from abc import ABC, abstractmethod
from typing import Optional
import logging

import httpx

logger = logging.getLogger(__name__)


class AuditNotifier(ABC):
    """Where audit messages go"""

    @abstractmethod
    async def send(self, message: str) -> None:
        """Deliver an audit message. Must not raise."""
        pass


class WebhookNotifier(AuditNotifier):
    """
    Posts audit messages to a Discord-compatible webhook.

    Body: {"content": message, "allowed_mentions": {"parse": []}} so user
    mentions in the message render but never ping anyone.
    """

    def __init__(
        self,
        webhook_url: str,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 5.0,
    ):
        """
        Args:
            webhook_url: Webhook endpoint
            client: Shared HTTP client (one is created if omitted)
            timeout: Request timeout in seconds
        """
        self.webhook_url = webhook_url
        self.client = client or httpx.AsyncClient(timeout=timeout)
        self.timeout = timeout

    async def send(self, message: str) -> None:
        payload = {
            "content": message,
            "allowed_mentions": {"parse": []},
        }
        try:
            response = await self.client.post(self.webhook_url, json=payload, timeout=self.timeout)
            response.raise_for_status()
        # InvalidURL is not an HTTPError; a misconfigured webhook must not fail the command
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error("Error sending to internal logs: %s", e)

    async def aclose(self) -> None:
        await self.client.aclose()


class NullNotifier(AuditNotifier):
    """
    Null Object Pattern - notifier used when no webhook is configured.
    Audit lines still reach the application log.
    """

    async def send(self, message: str) -> None:
        logger.debug("No audit webhook configured, dropping: %s", message)
