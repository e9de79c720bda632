from typing import Literal, Optional

from pydantic import Field, field_validator

from .common import CamelModel, validate_data_uri

Voice = Literal["alloy", "echo", "fable", "onyx", "nova", "shimmer"]


class SpeechToTextRequest(CamelModel):
    audio_data_uri: str = Field(..., description="Recording as a base64 audio data URI")
    language: str = Field("en", min_length=2, max_length=10)

    @field_validator("audio_data_uri")
    @classmethod
    def check_audio(cls, value: str) -> str:
        return validate_data_uri(value, media="audio")


class SpeechToTextResponse(CamelModel):
    transcript: str
    language: Optional[str] = None


class TextToSpeechRequest(CamelModel):
    text: str = Field(..., min_length=1, max_length=4096)
    voice: Voice = "alloy"
    speed: float = Field(1.0, ge=0.25, le=4.0)
