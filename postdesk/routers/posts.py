import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from postdesk import dependencies as deps
from postdesk.schemas.blog import PostDetail, PostSummary, TagCount
from postdesk.services.posts_service import PostsService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/posts", response_model=List[PostSummary])
def list_posts(
    tag: Optional[str] = None,
    drafts: bool = Query(False, description="Include posts marked draft"),
    service: PostsService = Depends(deps.get_posts_service),
):
    """Get all posts metadata."""
    try:
        return service.list_posts(include_drafts=drafts, tag=tag)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error listing posts: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve posts")


@router.get("/posts/{slug:path}", response_model=PostDetail)
def get_post(
    slug: str,
    drafts: bool = Query(False, description="Allow fetching a draft"),
    service: PostsService = Depends(deps.get_posts_service),
):
    """Get a single post by slug."""
    try:
        post = service.get_post(slug, include_drafts=drafts)
        if not post:
            raise HTTPException(status_code=404, detail="Post not found")
        return post
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error retrieving post {slug}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve post")


@router.get("/tags", response_model=List[TagCount])
def list_tags(
    drafts: bool = False,
    service: PostsService = Depends(deps.get_posts_service),
):
    try:
        return service.list_tags(include_drafts=drafts)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error listing tags: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve tags")
