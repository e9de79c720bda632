from typing import Literal

from pydantic import Field

from .common import CamelModel

IllustrationStyle = Literal["diagram", "realistic", "cartoon", "sketch"]
IllustrationSize = Literal["1024x1024", "1792x1024", "1024x1792"]


class IllustrationRequest(CamelModel):
    topic: str = Field(..., min_length=3, max_length=500, description="The educational topic to illustrate")
    style: IllustrationStyle = "diagram"
    size: IllustrationSize = "1024x1024"


class IllustrationResponse(CamelModel):
    image_url: str
    revised_prompt: str = Field(..., description="The prompt the image model actually used")
    explanation: str
