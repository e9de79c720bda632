"""
YouTube Data API v3 search.
"""
import html
import logging
import re
from typing import Any, Dict, List, Optional

import httpx

from superfocus.core.config import get_youtube_api_key
from superfocus.core.errors import UpstreamError

logger = logging.getLogger("superfocus.services.youtube")

YOUTUBE_API_BASE = "https://www.googleapis.com/youtube/v3"
REQUEST_TIMEOUT = 10.0
MAX_API_RESULTS = 50

_ISO_DURATION = re.compile(r"^P(?:(?P<days>\d+)D)?(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+)S)?)?$")


def format_duration(iso_duration: Optional[str]) -> str:
    """'PT12M34S' -> '12:34', 'PT1H2M3S' -> '1:02:03'; '---' when unknown."""
    if not iso_duration:
        return "---"
    match = _ISO_DURATION.match(iso_duration)
    if not match:
        return "---"

    parts = {key: int(value or 0) for key, value in match.groupdict().items()}
    hours = parts["days"] * 24 + parts["hours"]
    minutes, seconds = parts["minutes"], parts["seconds"]
    if hours:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


def _thumbnail(snippet: Dict[str, Any]) -> str:
    thumbnails = snippet.get("thumbnails") or {}
    for size in ("high", "medium", "default"):
        if thumbnails.get(size, {}).get("url"):
            return thumbnails[size]["url"]
    return ""


async def search_videos(query: str, max_candidates: int) -> List[Dict[str, Any]]:
    """
    Search YouTube for videos matching `query`, live broadcasts excluded.

    Returns dicts with id, title, thumbnail, channelTitle and duration.
    """
    api_key = get_youtube_api_key()
    if not api_key:
        raise UpstreamError("YouTube search is not configured")

    search_params = {
        "part": "snippet",
        "q": query,
        "type": "video",
        "safeSearch": "strict",
        "maxResults": min(max_candidates, MAX_API_RESULTS),
        "key": api_key,
    }

    try:
        async with httpx.AsyncClient(timeout=REQUEST_TIMEOUT) as client:
            response = await client.get(f"{YOUTUBE_API_BASE}/search", params=search_params)
            response.raise_for_status()
            items = [
                item for item in response.json().get("items", [])
                if item.get("id", {}).get("videoId")
                and item.get("snippet", {}).get("liveBroadcastContent", "none") == "none"
            ]

            durations: Dict[str, str] = {}
            if items:
                details = await client.get(
                    f"{YOUTUBE_API_BASE}/videos",
                    params={
                        "part": "contentDetails",
                        "id": ",".join(item["id"]["videoId"] for item in items),
                        "key": api_key,
                    },
                )
                details.raise_for_status()
                durations = {
                    video["id"]: video.get("contentDetails", {}).get("duration")
                    for video in details.json().get("items", [])
                }
    except httpx.HTTPError as e:
        logger.error(f"[YouTube] ❌ Search failed: {type(e).__name__}: {e}")
        raise UpstreamError("YouTube search failed") from e

    videos = []
    for item in items:
        snippet = item["snippet"]
        video_id = item["id"]["videoId"]
        videos.append({
            "id": video_id,
            "title": html.unescape(snippet.get("title", "")),
            "thumbnail": _thumbnail(snippet),
            "channelTitle": html.unescape(snippet.get("channelTitle", "")),
            "duration": format_duration(durations.get(video_id)),
        })

    logger.info(f"[YouTube] 🔍 {len(videos)} candidate video(s) for {query!r}")
    return videos
