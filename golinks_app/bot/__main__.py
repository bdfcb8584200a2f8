"""
Discord bot entry point.

Usage:
    python -m golinks_app.bot
    golinks-bot
"""

import asyncio
import logging
import sys

import discord

from golinks_app.bot.client import GoLinksBot
from golinks_app.config import settings
from golinks_app.dependencies import get_notifier, get_store
from golinks_app.kv.strategies import RedisKVStore
from golinks_app.notifications.webhook import WebhookNotifier

logger = logging.getLogger("golinks_app.bot")


async def main() -> None:
    """Start the bot and release the store and webhook clients on exit"""
    logger.info("=" * 60)
    logger.info("🔗 %s - Discord bot", settings.app_name)
    logger.info("Environment: %s", settings.environment)
    logger.info("Key-value backend: %s", settings.kv_backend)
    logger.info("Domains: %s", ", ".join(settings.domain_allowlist))
    logger.info("=" * 60)

    if not settings.discord_bot_token:
        logger.critical("DISCORD_BOT_TOKEN is not set")
        sys.exit(1)

    store = get_store()
    notifier = get_notifier()
    bot = GoLinksBot(
        store=store,
        notifier=notifier,
        allowed_domains=settings.domain_allowlist,
        guild_id=settings.discord_guild_id,
        autocomplete_limit=settings.autocomplete_limit,
    )

    try:
        async with bot:
            await bot.start(settings.discord_bot_token)
    except discord.LoginFailure:
        logger.critical("Failed to log in. Please check DISCORD_BOT_TOKEN.")
    finally:
        if isinstance(notifier, WebhookNotifier):
            await notifier.aclose()
        if isinstance(store, RedisKVStore):
            await store.close()


def run() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Bot shutting down.")


if __name__ == "__main__":
    run()
