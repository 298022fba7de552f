"""Blog routes. Reads are public, writes need an admin."""

from typing import Any

from fastapi import APIRouter, Body, Depends

from storefront.api.deps import get_blog_repository, get_event_tracker
from storefront.core.auth import Identity, require_admin
from storefront.domain.events import EventType
from storefront.services.event_tracker import EventTracker
from storefront.services.repositories import BlogRepository

router = APIRouter()


@router.get("")
async def list_posts(
    posts: BlogRepository = Depends(get_blog_repository),
    tracker: EventTracker = Depends(get_event_tracker),
):
    items = await posts.list()
    await tracker.record(EventType.PAGE_VIEW, {"page": "blog"})
    return {"posts": items}


@router.get("/{post_id}")
async def get_post(
    post_id: str,
    posts: BlogRepository = Depends(get_blog_repository),
):
    return {"post": await posts.view(post_id)}


@router.post("")
async def upsert_post(
    post: dict[str, Any] = Body(...),
    posts: BlogRepository = Depends(get_blog_repository),
    _: Identity = Depends(require_admin),
):
    post_id = await posts.upsert(post)
    return {"success": True, "id": post_id}


@router.delete("/{post_id}")
async def delete_post(
    post_id: str,
    posts: BlogRepository = Depends(get_blog_repository),
    _: Identity = Depends(require_admin),
):
    await posts.remove(post_id)
    return {"success": True}
