"""Post endpoints."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, status

from engage_dashboard.api.deps import AIProviderDep, CurrentUserDep, JsonBody, StoreDep
from engage_dashboard.domain.schemas import (
    InsertPost,
    Post,
    PostCreated,
    PostUpdate,
    User,
    enrich_post,
    validate_payload,
)
from engage_dashboard.logging import get_logger
from engage_dashboard.services.storage import MemoryStore

router = APIRouter(prefix="/posts", tags=["Posts"])
logger = get_logger(__name__)


def _owned_post(store: MemoryStore, user: User, post_id: int) -> Post:
    post = store.get_post(post_id)
    if post is None or post.user_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found or access denied",
        )
    return post


@router.get(
    "",
    response_model=list[Post],
    summary="List posts",
    description="List the user's posts. A date bound only matches scheduled posts.",
)
async def list_posts(
    store: StoreDep,
    user: CurrentUserDep,
    platform: str | None = None,
    status_filter: Annotated[str | None, Query(alias="status")] = None,
    start_date: Annotated[datetime | None, Query(alias="startDate")] = None,
    end_date: Annotated[datetime | None, Query(alias="endDate")] = None,
) -> list[Post]:
    return store.get_posts(
        user.id,
        platform=platform,
        status=status_filter,
        start_date=start_date,
        end_date=end_date,
    )


@router.get(
    "/scheduled",
    response_model=list[Post],
    summary="List scheduled posts",
)
async def list_scheduled_posts(store: StoreDep, user: CurrentUserDep) -> list[Post]:
    return store.get_scheduled_posts(user.id)


@router.get(
    "/{post_id}",
    response_model=Post,
    summary="Get post",
)
async def get_post(post_id: int, store: StoreDep, user: CurrentUserDep) -> Post:
    return _owned_post(store, user, post_id)


@router.post(
    "",
    response_model=PostCreated,
    status_code=status.HTTP_201_CREATED,
    summary="Create post",
    description="Create a post. With analyze=true the content is scored before it is stored.",
)
async def create_post(
    body: JsonBody,
    store: StoreDep,
    user: CurrentUserDep,
    provider: AIProviderDep,
    analyze: bool = False,
) -> PostCreated:
    """Create a post.

    Scores and identity in the body are discarded; the owner is always the
    current user.
    """
    insert = validate_payload(InsertPost, {**body, "userId": user.id})

    if not analyze:
        return PostCreated(post=store.create_post(insert))

    analysis = await provider.analyze_content(insert)
    extended = enrich_post(
        insert,
        engagement_score=analysis.engagement_score,
        shadowban_risk=analysis.shadowban_risk,
        audience_match=analysis.audience_match,
        post_analysis=analysis.to_wire(),
    )
    post = store.create_post(extended)
    logger.info(
        "post_analyzed",
        post_id=post.id,
        engagement_score=analysis.engagement_score,
        shadowban_risk=analysis.shadowban_risk,
    )
    return PostCreated(post=post, analysis=analysis)


@router.put(
    "/{post_id}",
    response_model=Post,
    summary="Update post",
)
async def update_post(post_id: int, body: JsonBody, store: StoreDep, user: CurrentUserDep) -> Post:
    _owned_post(store, user, post_id)
    update = validate_payload(PostUpdate, body)
    updated = store.update_post(post_id, update)
    if updated is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found or access denied",
        )
    return updated


@router.delete(
    "/{post_id}",
    summary="Delete post",
)
async def delete_post(post_id: int, store: StoreDep, user: CurrentUserDep) -> dict[str, str]:
    _owned_post(store, user, post_id)
    store.delete_post(post_id)
    logger.info("post_deleted", post_id=post_id)
    return {"message": "Post deleted successfully"}
