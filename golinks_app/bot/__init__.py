"""
Discord bot for managing short-links.
"""

from .client import GoLinksBot, register_commands, send_reply, to_choices, to_discord_embed

__all__ = [
    "GoLinksBot",
    "register_commands",
    "send_reply",
    "to_choices",
    "to_discord_embed",
]
