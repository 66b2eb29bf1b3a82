"""
Moderation API Router
Poem and comment listings for the moderation screens
"""
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from ..core.deps import get_moderation_service, get_request_id
from ..core.exceptions import PoemNotFoundException
from ..models.base import ErrorResponse, MetaInfo, SuccessResponse
from ..models.moderation import CommentListing, PoemListing, ReplySummary

router = APIRouter(prefix="/moderation", tags=["Moderation"])


@router.get(
    "/poems",
    response_model=SuccessResponse[List[PoemListing]],
    summary="Poem listing",
    description="Poems with comment counts, searchable by title or author."
)
async def list_poems(
    search: Optional[str] = Query(default=None, max_length=200),
    sort: str = Query(
        default="newest",
        description="newest, oldest, a-z, z-a, most-comments, least-comments"
    ),
    moderation_service=Depends(get_moderation_service),
    request_id: str = Depends(get_request_id)
):
    """List poems"""
    result = await moderation_service.list_poems(search=search, sort=sort)

    return SuccessResponse(
        data=result,
        meta=MetaInfo(request_id=request_id)
    )


@router.get(
    "/poems/{slug}/comments",
    response_model=SuccessResponse[List[CommentListing]],
    responses={404: {"model": ErrorResponse}},
    summary="Comment listing",
    description="Comments of one poem, searchable by content or author."
)
async def list_comments(
    slug: str,
    search: Optional[str] = Query(default=None, max_length=200),
    sort: str = Query(
        default="newest",
        description="newest, oldest, a-z, z-a, replied, not-replied"
    ),
    moderation_service=Depends(get_moderation_service),
    request_id: str = Depends(get_request_id)
):
    """List the comments of a poem"""
    if await moderation_service.find_poem(slug) is None:
        raise PoemNotFoundException(slug)

    result = await moderation_service.list_comments(slug, search=search, sort=sort)

    return SuccessResponse(
        data=result,
        meta=MetaInfo(request_id=request_id)
    )


@router.get(
    "/comment-counts",
    response_model=SuccessResponse[Dict[str, int]],
    summary="Comment count per poem",
    description="Map of poem id to comment count, including poems without comments."
)
async def get_comment_counts(
    moderation_service=Depends(get_moderation_service),
    request_id: str = Depends(get_request_id)
):
    """Get comment counts by poem"""
    result = await moderation_service.get_comment_counts_by_poem()

    return SuccessResponse(
        data=result,
        meta=MetaInfo(request_id=request_id)
    )


@router.get(
    "/replies",
    response_model=SuccessResponse[ReplySummary],
    summary="Reply summary",
    description="How many comments have an admin reply."
)
async def get_reply_summary(
    moderation_service=Depends(get_moderation_service),
    request_id: str = Depends(get_request_id)
):
    """Get reply summary"""
    result = await moderation_service.get_reply_summary()

    return SuccessResponse(
        data=result,
        meta=MetaInfo(request_id=request_id)
    )
