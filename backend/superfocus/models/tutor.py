from typing import List, Literal, Optional

from pydantic import Field, field_validator

from .common import CamelModel, validate_data_uri


class ConversationTurn(CamelModel):
    role: Literal["user", "assistant"]
    content: str


class TutorRequest(CamelModel):
    subject: Literal["Math", "Science", "Writing"]
    student_question: str = Field(..., min_length=1, max_length=5000)
    homework_image: Optional[str] = None
    conversation_history: Optional[List[ConversationTurn]] = None

    @field_validator("homework_image")
    @classmethod
    def check_image(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return validate_data_uri(value, media="image")


class Sketch(CamelModel):
    drawing: str = Field(
        ...,
        description="A simple SVG string illustrating the concept, using 'currentColor' for strokes.",
    )
    caption: str = Field(..., description="A brief caption for the sketch.")


class TutorResponse(CamelModel):
    tutor_response: str = Field(..., description="The tutor's answer to the student's question.")
    sketch: Optional[Sketch] = Field(None, description="An optional sketch to illustrate a math concept.")


class JokeRequest(CamelModel):
    subject: str = Field(..., min_length=1, max_length=100)


class JokeResponse(CamelModel):
    joke: str = Field(..., description="A kid-friendly joke about the subject.")
