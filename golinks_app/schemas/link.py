"""
Short-link record, its string encoding in the key-value store, and the
key scheme.

A short-link lives under the key "{domain}:{slug}" and its value is the
compact JSON object {"redirect_url": ..., "hits": ...}. Keys are split on
the first colon only, and new slugs may not contain one.
"""

from typing import Iterable, Tuple

from pydantic import BaseModel, Field, HttpUrl, TypeAdapter, ValidationError, computed_field

KEY_SEPARATOR = ":"
# Discord refuses autocomplete choice values longer than this
MAX_SLUG_LENGTH = 100

_http_url = TypeAdapter(HttpUrl)


class LinkValidationError(ValueError):
    """User supplied domain, slug or URL is not acceptable"""


class LinkDecodeError(ValueError):
    """A stored value is not a well-formed short-link record"""


class ShortLink(BaseModel):
    redirect_url: str = Field(..., min_length=1)
    # Only the redirect worker increments this
    hits: int = Field(..., ge=0, strict=True)


def encode(redirect_url: str, hits: int = 0) -> str:
    """Serialize a short-link record to its stored JSON form"""
    return ShortLink(redirect_url=redirect_url, hits=hits).model_dump_json()


def decode(raw: str) -> ShortLink:
    """
    Parse a stored value back into a ShortLink.

    Raises:
        LinkDecodeError: malformed JSON, missing/empty redirect_url,
            or hits missing, non-integer or negative
    """
    try:
        return ShortLink.model_validate_json(raw)
    except ValidationError as e:
        raise LinkDecodeError(f"Invalid short-link value: {e.error_count()} error(s)") from e


def make_key(domain: str, slug: str) -> str:
    return f"{domain}{KEY_SEPARATOR}{slug}"


def split_key(name: str) -> Tuple[str, str]:
    """
    Split a store key into (domain, slug) on the first colon.

    Raises:
        ValueError: no colon, or an empty domain or slug
    """
    domain, sep, slug = name.partition(KEY_SEPARATOR)
    if not sep or not domain or not slug:
        raise ValueError(f"Invalid key format: {name!r}")
    return domain, slug


def domain_prefix(domain: str) -> str:
    """Key prefix shared by every link of a domain"""
    return f"{domain}{KEY_SEPARATOR}"


def build_short_url(domain: str, slug: str) -> str:
    return f"https://{domain}/{slug}"


def validate_domain(domain: str, allowed: Iterable[str]) -> str:
    allowed = list(allowed)
    if domain not in allowed:
        raise LinkValidationError(
            f"Invalid domain. Short-links can only be created on: {', '.join(allowed)}"
        )
    return domain


def normalize_slug(slug: str) -> str:
    """
    Strip surrounding whitespace and slashes from a slug and check it.

    Slugs may contain inner slashes ("docs/api") but no colon, since the
    colon separates domain and slug in the store key.
    """
    cleaned = slug.strip().strip("/")
    if not cleaned:
        raise LinkValidationError("Invalid slug. The slug cannot be empty")
    if len(cleaned) > MAX_SLUG_LENGTH:
        raise LinkValidationError(f"Invalid slug. The slug cannot be longer than {MAX_SLUG_LENGTH} characters")
    if KEY_SEPARATOR in cleaned:
        raise LinkValidationError("Invalid slug. The slug cannot contain ':'")
    if any(ch.isspace() for ch in cleaned):
        raise LinkValidationError("Invalid slug. The slug cannot contain spaces")
    return cleaned


def validate_redirect_url(url: str) -> str:
    """
    Check that url is an absolute http(s) URL.

    Returns the URL as given (trimmed), not pydantic's normalized form,
    so "https://example.com" is not turned into "https://example.com/".
    """
    url = url.strip()
    try:
        _http_url.validate_python(url)
    except ValidationError:
        raise LinkValidationError("Invalid URL. Please provide a valid URL") from None
    return url


class LinkEntry(BaseModel):
    """A decoded short-link together with the key parts it was stored under"""
    domain: str
    slug: str
    redirect_url: str
    hits: int

    @computed_field
    @property
    def short_url(self) -> str:
        return build_short_url(self.domain, self.slug)


class LinkCreate(BaseModel):
    slug: str = Field(..., description="The slug for the short-link")
    url: str = Field(..., description="The URL the short-link should redirect to")


class LinkStats(BaseModel):
    slug: str
    redirect_url: str
    hits: int
