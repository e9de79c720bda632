from typing import Optional

from fastapi import APIRouter, Depends, Query

from superfocus.agents.youtube_search_graph import run_video_search
from superfocus.core.rate_limit import rate_limit_api
from superfocus.models.youtube import YouTubeSearchResponse, YouTubeVideo

router = APIRouter()


@router.get("/youtube-search", response_model=YouTubeSearchResponse, dependencies=[Depends(rate_limit_api)])
async def youtube_search(
    q: str = Query(..., min_length=1, max_length=200),
    subject: Optional[str] = Query(None, max_length=100),
    max_results: int = Query(3, ge=1, le=10, alias="maxResults"),
):
    """
    Search for kid-safe educational videos from whitelisted channels only.
    """
    videos = await run_video_search(q, subject, max_results)
    return YouTubeSearchResponse(videos=[YouTubeVideo.model_validate(video) for video in videos])
