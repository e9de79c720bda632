"""
Kid-safe educational video search as a small LangGraph pipeline:

    build_query -> search -> filter -> END

The search over-fetches candidates so that enough remain after the
whitelist filter drops channels that are not verified educational ones.
"""
import logging
from typing import Any, Dict, List, Optional, TypedDict

from langgraph.graph import END, StateGraph

from superfocus.services.safe_youtube_channels import build_safe_channel_query, filter_safe_videos
from superfocus.services.youtube_search_service import search_videos

logger = logging.getLogger("superfocus.agents.youtube")

CANDIDATE_MULTIPLIER = 3


class VideoSearchState(TypedDict, total=False):
    query: str
    subject: Optional[str]
    max_results: int
    search_query: str
    candidates: List[Dict[str, Any]]
    videos: List[Dict[str, Any]]


def build_query_node(state: VideoSearchState) -> Dict[str, Any]:
    return {"search_query": build_safe_channel_query(state["query"], state.get("subject"))}


async def search_node(state: VideoSearchState) -> Dict[str, Any]:
    candidates = await search_videos(state["search_query"], state["max_results"] * CANDIDATE_MULTIPLIER)
    return {"candidates": candidates}


def filter_node(state: VideoSearchState) -> Dict[str, Any]:
    safe = filter_safe_videos(state.get("candidates", []))
    dropped = len(state.get("candidates", [])) - len(safe)
    if dropped:
        logger.info(f"[YouTubeGraph] 🛡️ Dropped {dropped} video(s) from unlisted channels")
    return {"videos": safe[: state["max_results"]]}


def create_video_search_graph():
    workflow = StateGraph(VideoSearchState)

    workflow.add_node("build_query", build_query_node)
    workflow.add_node("search", search_node)
    workflow.add_node("filter", filter_node)

    workflow.set_entry_point("build_query")
    workflow.add_edge("build_query", "search")
    workflow.add_edge("search", "filter")
    workflow.add_edge("filter", END)

    return workflow.compile()


video_search_graph = create_video_search_graph()


async def run_video_search(query: str, subject: Optional[str] = None, max_results: int = 3) -> List[Dict[str, Any]]:
    """Return at most `max_results` whitelisted videos for `query`, in search order."""
    logger.info(f"[YouTubeGraph] 🎬 Searching videos for {query!r} (subject={subject}, max={max_results})")
    result = await video_search_graph.ainvoke({
        "query": query,
        "subject": subject,
        "max_results": max_results,
    })
    return result.get("videos", [])
