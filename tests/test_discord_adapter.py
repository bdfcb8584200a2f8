"""
Tests for the Discord adapter: command registration and reply rendering.
"""
import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock

import discord

from golinks_app.bot.client import GoLinksBot, send_reply, to_choices, to_discord_embed
from golinks_app.commands import registry
from golinks_app.commands.replies import LinkEmbed, Reply, Suggestion
from tests.fakes import DOMAIN, RecordingKVStore, RecordingNotifier


def make_bot(store=None):
    return GoLinksBot(
        store=store or RecordingKVStore(),
        notifier=RecordingNotifier(),
        allowed_domains=[DOMAIN],
    )


def fake_interaction(done=False, domain=None):
    response = SimpleNamespace(
        is_done=lambda: done,
        send_message=AsyncMock(),
        defer=AsyncMock(),
    )
    return SimpleNamespace(
        response=response,
        followup=SimpleNamespace(send=AsyncMock()),
        user=SimpleNamespace(id=1234),
        namespace=SimpleNamespace(domain=domain),
        command=None,
    )


class TestCommandRegistration:
    """Test the application command tree"""

    def test_top_level_commands(self):
        bot = make_bot()
        names = {command.name for command in bot.tree.get_commands()}
        assert names == {"links", "list-links", "ping"}

    def test_links_subcommands(self):
        bot = make_bot()
        group = bot.tree.get_command("links")
        assert {command.name for command in group.commands} == {"create", "delete", "stats", "list"}

    def test_domain_choices_are_allowlist(self):
        bot = make_bot()
        create = bot.tree.get_command("links").get_command("create")
        domain = create.get_parameter("domain")
        assert [choice.value for choice in domain.choices] == [DOMAIN]

    def test_link_option_autocompletes(self):
        bot = make_bot()
        delete = bot.tree.get_command("links").get_command("delete")
        assert delete.get_parameter("link").autocomplete


class TestRendering:
    """Test conversion of replies to Discord objects"""

    def test_embed(self):
        embed = to_discord_embed(LinkEmbed(title="go.example.org", description="body", footer="1 Link(s)"))

        assert embed.title == "go.example.org"
        assert embed.description == "body"
        assert embed.footer.text == "1 Link(s)"
        assert embed.color.value == 0x454B1B

    def test_embed_description_truncated(self):
        embed = to_discord_embed(LinkEmbed(title="t", description="x" * 5000, footer="f"))
        assert len(embed.description) == 4096

    def test_choices(self):
        choices = to_choices([Suggestion("alpha", "alpha"), Suggestion("long", "y" * 101)])
        assert [choice.value for choice in choices] == ["alpha"]

    def test_choices_fall_back_to_placeholder(self):
        """Test that dropping every suggestion still leaves the placeholder"""
        choices = to_choices([Suggestion("long", "y" * 150)])
        assert [choice.value for choice in choices] == ["NO_LINKS_FOUND_FOR_DOMAIN"]

    def test_send_reply_before_defer(self):
        interaction = fake_interaction(done=False)

        asyncio.run(send_reply(interaction, Reply(content="Pong!")))

        interaction.response.send_message.assert_awaited_once_with(ephemeral=False, content="Pong!")

    def test_send_reply_after_defer(self):
        interaction = fake_interaction(done=True)

        asyncio.run(send_reply(interaction, Reply(embed=LinkEmbed(title="t", description="d", footer="f"))))

        kwargs = interaction.followup.send.await_args.kwargs
        assert isinstance(kwargs["embed"], discord.Embed)
        assert "content" not in kwargs


class TestBotFlow:
    """Test interactions flowing through the registry"""

    def test_run_command_creates_link(self):
        store = RecordingKVStore()
        bot = make_bot(store)
        interaction = fake_interaction(done=True)

        asyncio.run(bot.run_command(
            interaction, registry.CREATE, domain=DOMAIN, url="https://example.com", slug="ex"
        ))

        interaction.response.defer.assert_awaited_once()
        interaction.followup.send.assert_awaited_once_with(
            ephemeral=False, content="Short-link created: https://go.example.org/ex"
        )
        assert bot.notifier.messages[0].startswith("Short-link created by <@1234> (1234)")

    def test_autocomplete_uses_namespace_domain(self):
        bot = make_bot(RecordingKVStore({"go.example.org:alpha": "{}"}))
        interaction = fake_interaction(domain=DOMAIN)

        choices = asyncio.run(bot.autocomplete(interaction, registry.STATS, "link", ""))

        assert [choice.value for choice in choices] == ["alpha"]

    def test_autocomplete_with_only_long_legacy_slugs(self):
        bot = make_bot(RecordingKVStore({"go.example.org:" + "y" * 150: "{}"}))
        interaction = fake_interaction(domain=DOMAIN)

        choices = asyncio.run(bot.autocomplete(interaction, registry.STATS, "link", ""))

        assert [choice.value for choice in choices] == ["NO_LINKS_FOUND_FOR_DOMAIN"]

    def test_autocomplete_before_domain_chosen(self):
        bot = make_bot()
        interaction = fake_interaction(domain=None)

        choices = asyncio.run(bot.autocomplete(interaction, registry.DELETE, "link", ""))

        assert [choice.value for choice in choices] == ["NO_LINKS_FOUND_FOR_DOMAIN"]
