"""
Audit notification sinks for short-link changes.
"""

from .webhook import AuditNotifier, WebhookNotifier, NullNotifier

__all__ = [
    "AuditNotifier",
    "WebhookNotifier",
    "NullNotifier",
]
