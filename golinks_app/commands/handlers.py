"""
Short-link command handlers.

Each handler is a plain coroutine that receives everything it needs as
arguments (store, notifier, options) and returns a Reply. Nothing is
kept between invocations.
"""

from typing import Iterable, List, Optional
import logging

from golinks_app.commands.replies import NO_LINKS_SUGGESTION, LinkEmbed, Reply, Suggestion
from golinks_app.kv.strategies import KVStore, KVStoreError
from golinks_app.notifications.webhook import AuditNotifier
from golinks_app.schemas.link import (
    LinkDecodeError,
    LinkValidationError,
    build_short_url,
    decode,
    make_key,
    normalize_slug,
    validate_domain,
    validate_redirect_url,
)
from golinks_app.services import links

logger = logging.getLogger(__name__)


def _actor(user_id: Optional[int]) -> str:
    if user_id is None:
        return "an unknown user"
    return f"<@{user_id}> ({user_id})"


def _target_of(raw: str) -> str:
    """Redirect target of a stored value, or the raw value if it does not decode"""
    try:
        return decode(raw).redirect_url
    except LinkDecodeError:
        return raw


async def create_link(
    store: KVStore,
    notifier: AuditNotifier,
    domain: str,
    url: str,
    slug: str,
    allowed_domains: Iterable[str],
    user_id: Optional[int] = None,
) -> Reply:
    """
    Create (or overwrite) the short-link domain/slug pointing at url.
    """
    try:
        domain = validate_domain(domain, allowed_domains)
        slug = normalize_slug(slug)
        url = validate_redirect_url(url)
    except LinkValidationError as e:
        return Reply(content=str(e))

    try:
        await links.save_link(store, domain, slug, url)
    except KVStoreError as e:
        logger.error("Error creating short-link %s: %s", make_key(domain, slug), e)
        return Reply(content=f"Error creating short-link: {e}")

    short_url = build_short_url(domain, slug)
    audit = f"Short-link created by {_actor(user_id)}: <{short_url}> -> <{url}>"
    logger.info(audit)
    await notifier.send(audit)

    return Reply(content=f"Short-link created: {short_url}")


async def delete_link(
    store: KVStore,
    notifier: AuditNotifier,
    domain: str,
    link: str,
    user_id: Optional[int] = None,
) -> Reply:
    key = make_key(domain, link)
    raw = await links.fetch_raw(store, domain, link)
    if raw is None:
        return Reply(content=f"Short-link not found: {key}")

    # Not atomic with the read above; a concurrent delete is harmless
    try:
        await links.remove_link(store, domain, link)
    except KVStoreError as e:
        logger.error("Error deleting short-link %s: %s", key, e)
        return Reply(content=f"Error deleting short-link: {e}")

    short_url = build_short_url(domain, link)
    audit = f"Short-link deleted by {_actor(user_id)}: <{short_url}> -> <{_target_of(raw)}>"
    logger.info(audit)
    await notifier.send(audit)

    return Reply(content=f"Short-link deleted: `{short_url}`")


async def link_stats(store: KVStore, domain: str, link: str) -> Reply:
    """
    Report target and hit count of one short-link.

    A malformed stored value raises LinkDecodeError.
    """
    short_link = await links.fetch_link(store, domain, link)
    if short_link is None:
        return Reply(content=f"Short-link not found: {make_key(domain, link)}")

    return Reply(content=(
        f"Stats for short-link: `{build_short_url(domain, link)}`\n\n"
        f"**Link**: `{short_link.redirect_url}`\n"
        f"**Total Hits**: {short_link.hits}"
    ))


async def list_links(store: KVStore) -> Reply:
    """All short-links grouped per domain, as one embed"""
    entries = await links.collect_links(store)
    if not entries:
        return Reply(content="No short-links found")

    grouped = links.group_by_domain(entries)
    blocks = []
    for domain_entries in grouped.values():
        blocks.append("\n\n".join(
            f"**Link:** {entry.short_url}\n **Target:** {entry.redirect_url} (Uses: {entry.hits})"
            for entry in domain_entries
        ))

    return Reply(embed=LinkEmbed(
        title=", ".join(grouped),
        description="\n\n\n".join(blocks),
        footer=f"{len(entries)} Link(s)",
    ))


async def ping() -> Reply:
    return Reply(content="Pong!")


async def autocomplete_links(
    store: KVStore,
    domain: Optional[str],
    current: str = "",
    limit: Optional[int] = None,
) -> List[Suggestion]:
    """
    Slug suggestions for the `link` option of delete and stats.

    Always returns at least one suggestion: when nothing matches (or no
    domain is chosen yet) the NO_LINKS_SUGGESTION placeholder.
    """
    if not domain:
        return [NO_LINKS_SUGGESTION]

    slugs = await links.suggest_slugs(store, domain, current=current, limit=limit)
    if not slugs:
        return [NO_LINKS_SUGGESTION]

    return [Suggestion(name=slug, value=slug) for slug in slugs]
