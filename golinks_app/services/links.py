"""
Short-link operations over a key-value store.

Plain async functions: the store is always passed in by the caller, so the
same code backs the Discord commands and the admin API.
"""

from typing import Dict, List, Optional
import logging

from golinks_app.kv.strategies import KVStore
from golinks_app.schemas.link import (
    KEY_SEPARATOR,
    LinkDecodeError,
    LinkEntry,
    ShortLink,
    decode,
    domain_prefix,
    encode,
    make_key,
    split_key,
)

logger = logging.getLogger(__name__)


async def save_link(store: KVStore, domain: str, slug: str, redirect_url: str) -> ShortLink:
    """
    Write a fresh short-link (hits=0) under domain:slug.

    Note: No existence check - an existing slug is overwritten.
    Store failures (KVStoreError) propagate to the caller.
    """
    value = encode(redirect_url, hits=0)
    await store.put(make_key(domain, slug), value)
    return decode(value)


async def fetch_raw(store: KVStore, domain: str, slug: str) -> Optional[str]:
    """Stored value for domain:slug, or None if absent"""
    return await store.get(make_key(domain, slug))


async def fetch_link(store: KVStore, domain: str, slug: str) -> Optional[ShortLink]:
    """
    Get a decoded short-link, or None if absent.

    Raises:
        LinkDecodeError: the stored value is malformed
    """
    raw = await fetch_raw(store, domain, slug)
    if raw is None:
        return None
    return decode(raw)


async def remove_link(store: KVStore, domain: str, slug: str) -> None:
    await store.delete(make_key(domain, slug))


async def collect_links(store: KVStore, domain: Optional[str] = None) -> List[LinkEntry]:
    """
    Read every short-link (or every link of one domain) from the store.

    Keys that do not split into domain:slug, keys whose value vanished
    since listing, and values that fail to decode are skipped with a
    warning; they never abort the listing. The result is not a snapshot:
    the store may change while it is being read.
    """
    prefix = domain_prefix(domain) if domain else None
    entries: List[LinkEntry] = []

    for name in await store.list_keys(prefix):
        try:
            key_domain, slug = split_key(name)
        except ValueError:
            logger.warning("Skipping invalid key format: %s", name)
            continue

        raw = await store.get(name)
        if raw is None:
            logger.warning("No value found for key: %s", name)
            continue

        try:
            link = decode(raw)
        except LinkDecodeError as e:
            logger.warning("Skipping invalid value for key %s: %s", name, e)
            continue

        entries.append(LinkEntry(
            domain=key_domain,
            slug=slug,
            redirect_url=link.redirect_url,
            hits=link.hits,
        ))

    return entries


def group_by_domain(entries: List[LinkEntry]) -> Dict[str, List[LinkEntry]]:
    """Group entries per domain, keeping first-seen domain order"""
    grouped: Dict[str, List[LinkEntry]] = {}
    for entry in entries:
        grouped.setdefault(entry.domain, []).append(entry)
    return grouped


async def suggest_slugs(
    store: KVStore,
    domain: str,
    current: str = "",
    limit: Optional[int] = None,
) -> List[str]:
    """
    Slugs stored under a domain, for autocomplete.

    Args:
        store: Key-value store
        domain: Domain whose keys are listed
        current: Text typed so far; case-insensitive substring filter
        limit: Maximum number of slugs returned (None for all)

    Returns:
        Unique slugs in key order
    """
    slugs: List[str] = []
    seen = set()
    needle = current.strip().lower()

    for name in await store.list_keys(domain_prefix(domain)):
        # Everything after the first colon, so legacy slugs with colons survive
        slug = name.partition(KEY_SEPARATOR)[2]
        if not slug or slug in seen:
            continue
        if needle and needle not in slug.lower():
            continue
        seen.add(slug)
        slugs.append(slug)
        if limit is not None and len(slugs) >= limit:
            break

    return slugs
