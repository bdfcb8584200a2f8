"""
Platform independent command results.

Handlers return these; the Discord adapter turns them into messages,
embeds and autocomplete choices.
"""

from dataclasses import dataclass
from typing import Optional

EMBED_COLOR = 0x454B1B


@dataclass(frozen=True)
class LinkEmbed:
    title: str
    description: str
    footer: str
    color: int = EMBED_COLOR


@dataclass(frozen=True)
class Reply:
    """A text reply, an embed reply, or both"""
    content: Optional[str] = None
    embed: Optional[LinkEmbed] = None


@dataclass(frozen=True)
class Suggestion:
    """One autocomplete choice: label shown to the user and submitted value"""
    name: str
    value: str


# Offered when a domain has no links; not a real slug
NO_LINKS_SUGGESTION = Suggestion(name="No links found!", value="NO_LINKS_FOUND_FOR_DOMAIN")
