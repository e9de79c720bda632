from typing import List

from .common import CamelModel


class YouTubeVideo(CamelModel):
    id: str
    title: str
    thumbnail: str = ""
    channel_title: str = ""
    duration: str = "---"


class YouTubeSearchResponse(CamelModel):
    videos: List[YouTubeVideo]
