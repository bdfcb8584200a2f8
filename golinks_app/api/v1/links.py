from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from golinks_app.dependencies import get_allowed_domains, get_store, require_access_key
from golinks_app.kv.strategies import KVStore, KVStoreError
from golinks_app.schemas.link import (
    LinkCreate,
    LinkEntry,
    LinkStats,
    LinkValidationError,
    normalize_slug,
    validate_domain,
    validate_redirect_url,
)
from golinks_app.services import links

router = APIRouter(
    prefix="/domains/{domain}/links",
    tags=["links"],
    dependencies=[Depends(require_access_key)],
)


@router.get("/", response_model=List[LinkEntry])
async def list_domain_links(domain: str, store: KVStore = Depends(get_store)):
    """List every short-link of a domain (malformed entries are skipped)"""
    return await links.collect_links(store, domain)


@router.get("/{slug:path}/stats", response_model=LinkStats)
async def get_link_stats(domain: str, slug: str, store: KVStore = Depends(get_store)):
    """Get target and hit count of a short-link"""
    link = await links.fetch_link(store, domain, slug)
    if link is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Short link not found"
        )
    return LinkStats(slug=slug, redirect_url=link.redirect_url, hits=link.hits)


@router.post("/", response_model=LinkEntry, status_code=status.HTTP_201_CREATED)
async def create_link(
    domain: str,
    link_data: LinkCreate,
    store: KVStore = Depends(get_store),
    allowed_domains: tuple = Depends(get_allowed_domains),
):
    """
    Create a short-link.

    Unlike the bot command, an existing slug is rejected with 409
    instead of being overwritten.
    """
    try:
        domain = validate_domain(domain, allowed_domains)
        slug = normalize_slug(link_data.slug)
        url = validate_redirect_url(link_data.url)
    except LinkValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if await links.fetch_raw(store, domain, slug) is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Slug already exists"
        )

    try:
        link = await links.save_link(store, domain, slug, url)
    except KVStoreError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))

    return LinkEntry(domain=domain, slug=slug, redirect_url=link.redirect_url, hits=link.hits)


@router.delete("/{slug:path}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_link(domain: str, slug: str, store: KVStore = Depends(get_store)):
    """Delete a short-link"""
    if await links.fetch_raw(store, domain, slug) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Short link not found"
        )
    try:
        await links.remove_link(store, domain, slug)
    except KVStoreError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
