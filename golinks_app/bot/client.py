"""
Discord adapter for the short-link commands.

Registers /links (create, delete, stats, list), /list-links and /ping as
application commands, turns each interaction into an Invocation for the
command registry and renders the returned Reply. Interaction signing,
command sync and embed rendering are left to discord.py.
"""

from typing import Iterable, List, Optional, Sequence
import logging

import discord
from discord import app_commands

from golinks_app.commands import registry
from golinks_app.commands.replies import NO_LINKS_SUGGESTION, LinkEmbed, Reply, Suggestion
from golinks_app.kv.strategies import KVStore
from golinks_app.notifications.webhook import AuditNotifier

logger = logging.getLogger(__name__)

# Discord API limits
EMBED_TITLE_LIMIT = 256
EMBED_DESCRIPTION_LIMIT = 4096
EMBED_FOOTER_LIMIT = 2048
CHOICE_LENGTH_LIMIT = 100

GENERIC_ERROR_REPLY = Reply(content="Something went wrong while running this command.")


def _truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[:limit - 1] + "…"


def to_discord_embed(embed: LinkEmbed) -> discord.Embed:
    result = discord.Embed(
        title=_truncate(embed.title, EMBED_TITLE_LIMIT),
        description=_truncate(embed.description, EMBED_DESCRIPTION_LIMIT),
        color=discord.Color(embed.color),
    )
    result.set_footer(text=_truncate(embed.footer, EMBED_FOOTER_LIMIT))
    return result


def to_choices(suggestions: Iterable[Suggestion]) -> List[app_commands.Choice[str]]:
    # A value over the limit could not be submitted back, so drop it
    kept = [s for s in suggestions if len(s.value) <= CHOICE_LENGTH_LIMIT]
    if not kept:
        kept = [NO_LINKS_SUGGESTION]
    return [app_commands.Choice(name=_truncate(s.name, CHOICE_LENGTH_LIMIT), value=s.value) for s in kept]


async def send_reply(interaction: discord.Interaction, reply: Reply, ephemeral: bool = False) -> None:
    """Send a Reply as the interaction response, or as a followup once deferred"""
    kwargs = {}
    if reply.content is not None:
        kwargs["content"] = reply.content
    if reply.embed is not None:
        kwargs["embed"] = to_discord_embed(reply.embed)

    if interaction.response.is_done():
        await interaction.followup.send(ephemeral=ephemeral, **kwargs)
    else:
        await interaction.response.send_message(ephemeral=ephemeral, **kwargs)


def _descriptions(spec: registry.CommandSpec) -> dict:
    return {opt.name: opt.description for opt in spec.options}


class GoLinksBot(discord.Client):
    """Discord client exposing the short-link commands"""

    def __init__(
        self,
        *,
        store: KVStore,
        notifier: AuditNotifier,
        allowed_domains: Sequence[str],
        guild_id: Optional[int] = None,
        autocomplete_limit: int = 25,
    ):
        super().__init__(intents=discord.Intents.default())
        self.store = store
        self.notifier = notifier
        self.allowed_domains = tuple(allowed_domains)
        self.guild_id = guild_id
        self.autocomplete_limit = autocomplete_limit
        self.tree = app_commands.CommandTree(self)
        self.tree.error(self.on_tree_error)
        register_commands(self.tree, self)

    def build_invocation(
        self,
        interaction: discord.Interaction,
        spec: registry.CommandSpec,
        options: dict,
    ) -> registry.Invocation:
        return registry.Invocation(
            command=spec.qualified_name,
            store=self.store,
            notifier=self.notifier,
            options=options,
            allowed_domains=self.allowed_domains,
            user_id=interaction.user.id if interaction.user else None,
            autocomplete_limit=self.autocomplete_limit,
        )

    async def run_command(self, interaction: discord.Interaction, spec: registry.CommandSpec, **options) -> None:
        await interaction.response.defer(thinking=True)
        reply = await registry.dispatch(self.build_invocation(interaction, spec, options))
        await send_reply(interaction, reply)

    async def autocomplete(
        self,
        interaction: discord.Interaction,
        spec: registry.CommandSpec,
        option: str,
        current: str,
    ) -> List[app_commands.Choice[str]]:
        # The domain picked so far lives in the namespace; None until chosen
        options = {"domain": interaction.namespace.domain}
        suggestions = await registry.complete(
            self.build_invocation(interaction, spec, options), option, current
        )
        return to_choices(suggestions)

    async def on_tree_error(self, interaction: discord.Interaction, error: app_commands.AppCommandError) -> None:
        command = interaction.command.qualified_name if interaction.command else "unknown"
        original = getattr(error, "original", error)
        logger.error("Command /%s failed", command, exc_info=original)
        try:
            await send_reply(interaction, GENERIC_ERROR_REPLY, ephemeral=True)
        except discord.HTTPException as e:
            logger.error("Could not report failure of /%s: %s", command, e)

    async def setup_hook(self) -> None:
        if self.guild_id:
            guild = discord.Object(id=self.guild_id)
            self.tree.copy_global_to(guild=guild)
            synced = await self.tree.sync(guild=guild)
            logger.info("✅ Synced %d commands to guild %s", len(synced), self.guild_id)
        else:
            synced = await self.tree.sync()
            logger.info("✅ Synced %d global commands", len(synced))

    async def on_ready(self) -> None:
        logger.info("Logged in as %s (%s)", self.user, self.user.id if self.user else "?")


def register_commands(tree: app_commands.CommandTree, bot: GoLinksBot) -> None:
    """Add the /links group, /list-links and /ping to the command tree"""
    domain_choices = [app_commands.Choice(name=d, value=d) for d in bot.allowed_domains]
    group = app_commands.Group(name=registry.LINKS_GROUP, description=registry.LINKS_GROUP_DESCRIPTION)

    @group.command(name=registry.CREATE.name, description=registry.CREATE.description)
    @app_commands.describe(**_descriptions(registry.CREATE))
    @app_commands.choices(domain=domain_choices)
    async def links_create(interaction: discord.Interaction, domain: str, url: str, slug: str):
        await bot.run_command(interaction, registry.CREATE, domain=domain, url=url, slug=slug)

    @group.command(name=registry.DELETE.name, description=registry.DELETE.description)
    @app_commands.describe(**_descriptions(registry.DELETE))
    @app_commands.choices(domain=domain_choices)
    async def links_delete(interaction: discord.Interaction, domain: str, link: str):
        await bot.run_command(interaction, registry.DELETE, domain=domain, link=link)

    @links_delete.autocomplete("link")
    async def links_delete_autocomplete(interaction: discord.Interaction, current: str):
        return await bot.autocomplete(interaction, registry.DELETE, "link", current)

    @group.command(name=registry.STATS.name, description=registry.STATS.description)
    @app_commands.describe(**_descriptions(registry.STATS))
    @app_commands.choices(domain=domain_choices)
    async def links_stats(interaction: discord.Interaction, domain: str, link: str):
        await bot.run_command(interaction, registry.STATS, domain=domain, link=link)

    @links_stats.autocomplete("link")
    async def links_stats_autocomplete(interaction: discord.Interaction, current: str):
        return await bot.autocomplete(interaction, registry.STATS, "link", current)

    @group.command(name=registry.LIST.name, description=registry.LIST.description)
    async def links_list(interaction: discord.Interaction):
        await bot.run_command(interaction, registry.LIST)

    @app_commands.command(name=registry.LIST_LINKS.name, description=registry.LIST_LINKS.description)
    async def list_links(interaction: discord.Interaction):
        await bot.run_command(interaction, registry.LIST_LINKS)

    @app_commands.command(name=registry.PING.name, description=registry.PING.description)
    async def ping(interaction: discord.Interaction):
        await bot.run_command(interaction, registry.PING)

    tree.add_command(group)
    tree.add_command(list_links)
    tree.add_command(ping)
