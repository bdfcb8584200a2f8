"""
Command table and dispatcher.

Every command is described by a CommandSpec record: its name, options and
whether it offers autocomplete. dispatch() and complete() pick the handler
by command name; the Discord adapter only collects option values into an
Invocation and renders the returned Reply.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple

from golinks_app.commands import handlers
from golinks_app.commands.replies import Reply, Suggestion
from golinks_app.kv.strategies import KVStore
from golinks_app.notifications.webhook import AuditNotifier

LINKS_GROUP = "links"
LINKS_GROUP_DESCRIPTION = "Short-link root command"


class UnknownCommandError(KeyError):
    """No command is registered under this name"""


@dataclass(frozen=True)
class OptionSpec:
    name: str
    description: str
    required: bool = True
    autocomplete: bool = False
    # Choices are the configured domain allowlist
    domain_choices: bool = False


@dataclass(frozen=True)
class CommandSpec:
    name: str
    description: str
    options: Tuple[OptionSpec, ...] = ()
    has_autocomplete: bool = False
    group: Optional[str] = None

    @property
    def qualified_name(self) -> str:
        return f"{self.group} {self.name}" if self.group else self.name

    def option(self, name: str) -> Optional[OptionSpec]:
        for opt in self.options:
            if opt.name == name:
                return opt
        return None

    def missing_options(self, values: Mapping[str, Optional[str]]) -> List[str]:
        return [opt.name for opt in self.options if opt.required and not values.get(opt.name)]


@dataclass(frozen=True)
class Invocation:
    """One command call with its dependencies passed explicitly"""
    command: str
    store: KVStore
    notifier: AuditNotifier
    options: Mapping[str, Optional[str]] = field(default_factory=dict)
    allowed_domains: Tuple[str, ...] = ()
    user_id: Optional[int] = None
    autocomplete_limit: Optional[int] = 25


def _domain_option(action: str) -> OptionSpec:
    return OptionSpec(
        name="domain",
        description=f"The domain this short-link {action} (e.g. 'go.example.org')",
        domain_choices=True,
    )


CREATE = CommandSpec(
    name="create",
    group=LINKS_GROUP,
    description="Create a short-link",
    options=(
        _domain_option("should be created on"),
        OptionSpec(name="url", description="The URL the short-link should redirect to"),
        OptionSpec(name="slug", description="The slug for the short-link"),
    ),
)

DELETE = CommandSpec(
    name="delete",
    group=LINKS_GROUP,
    description="Delete a short-link",
    options=(
        _domain_option("should be deleted from"),
        OptionSpec(name="link", description="The link to be deleted", autocomplete=True),
    ),
    has_autocomplete=True,
)

STATS = CommandSpec(
    name="stats",
    group=LINKS_GROUP,
    description="Get stats of a short-link",
    options=(
        _domain_option("is served from"),
        OptionSpec(name="link", description="The link to get stats on", autocomplete=True),
    ),
    has_autocomplete=True,
)

LIST = CommandSpec(name="list", group=LINKS_GROUP, description="List all short-links")

# Flattened duplicate of /links list
LIST_LINKS = CommandSpec(name="list-links", description="List all short-links")

PING = CommandSpec(name="ping", description="Check that the bot is alive")

COMMANDS: Dict[str, CommandSpec] = {
    spec.qualified_name: spec
    for spec in (CREATE, DELETE, STATS, LIST, LIST_LINKS, PING)
}


def get_command(name: str) -> CommandSpec:
    try:
        return COMMANDS[name]
    except KeyError:
        raise UnknownCommandError(name) from None


async def dispatch(invocation: Invocation) -> Reply:
    """Run the handler for invocation.command and return its reply"""
    spec = get_command(invocation.command)
    if spec.missing_options(invocation.options):
        return Reply(content="Missing required options")

    opts = invocation.options
    name = spec.qualified_name

    if name == CREATE.qualified_name:
        return await handlers.create_link(
            invocation.store,
            invocation.notifier,
            domain=opts["domain"],
            url=opts["url"],
            slug=opts["slug"],
            allowed_domains=invocation.allowed_domains,
            user_id=invocation.user_id,
        )
    if name == DELETE.qualified_name:
        return await handlers.delete_link(
            invocation.store,
            invocation.notifier,
            domain=opts["domain"],
            link=opts["link"],
            user_id=invocation.user_id,
        )
    if name == STATS.qualified_name:
        return await handlers.link_stats(invocation.store, domain=opts["domain"], link=opts["link"])
    if name in (LIST.qualified_name, LIST_LINKS.qualified_name):
        return await handlers.list_links(invocation.store)
    if name == PING.qualified_name:
        return await handlers.ping()

    raise UnknownCommandError(name)


async def complete(invocation: Invocation, option: str, current: str = "") -> List[Suggestion]:
    """Autocomplete choices for one option of invocation.command"""
    spec = get_command(invocation.command)
    focused = spec.option(option)
    if not spec.has_autocomplete or focused is None or not focused.autocomplete:
        return []

    return await handlers.autocomplete_links(
        invocation.store,
        invocation.options.get("domain"),
        current=current,
        limit=invocation.autocomplete_limit,
    )
