"""
Whitelist of verified educational YouTube channels for kid-safe video results.

Matching is a case-insensitive substring test on the channel name: a channel
that is not listed is always dropped, and a channel whose name merely
contains a listed name is let through.
"""
from typing import Any, Dict, Iterable, List, Optional

SAFE_EDUCATIONAL_CHANNELS = [
    # Major educational institutions
    "Khan Academy",
    "TED-Ed",
    "National Geographic",
    "Discovery",
    "History",
    "Smithsonian Channel",
    "PBS",
    "BBC",
    "Crash Course",
    "Kurzgesagt",
    # Science & nature
    "SciShow",
    "Vsauce",
    "Veritasium",
    "MinutePhysics",
    "AsapSCIENCE",
    "SmarterEveryDay",
    "The Slow Mo Guys",
    "Mark Rober",
    # Math & programming
    "Numberphile",
    "3Blue1Brown",
    "Math Antics",
    "PatrickJMT",
    "Professor Leonard",
    "The Organic Chemistry Tutor",
    "freeCodeCamp.org",
    # Kids learning
    "Peekaboo Kidz",
    "Free School",
    "Kids Learning Tube",
    "Homeschool Pop",
    "Happy Learning English",
    # Language learning
    "Easy English",
    "Learn English with TV Series",
    "Rachel's English",
    # History & social studies
    "History Matters",
    "OverSimplified",
    "Extra Credits",
    "The Great War",
    # General education
    "It's Okay To Be Smart",
    "CGP Grey",
    "Amoeba Sisters",
    "Bozeman Science",
    "Professor Dave Explains",
]

# Channels named in the search query itself to bias results toward them
TOP_CHANNELS = ["Khan Academy", "TED-Ed", "National Geographic", "Crash Course", "SciShow"]

EDUCATIONAL_TERMS = "educational tutorial explained lesson"

_NORMALIZED_CHANNELS = [channel.lower() for channel in SAFE_EDUCATIONAL_CHANNELS]


def build_safe_channel_query(topic: str, subject: Optional[str] = None) -> str:
    base_query = f"{subject} {topic}" if subject else topic
    channels = " OR ".join(f'"{channel}"' for channel in TOP_CHANNELS)
    return f"{base_query} {EDUCATIONAL_TERMS} ({channels})"


def is_safe_channel(channel_title: str) -> bool:
    normalized = channel_title.lower().strip()
    if not normalized:
        return False
    return any(safe in normalized for safe in _NORMALIZED_CHANNELS)


def filter_safe_videos(videos: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Keep only videos whose `channelTitle` is on the whitelist, preserving order."""
    return [video for video in videos if video.get("channelTitle") and is_safe_channel(video["channelTitle"])]
