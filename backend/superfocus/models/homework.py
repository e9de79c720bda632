from typing import List, Optional

from pydantic import Field, field_validator

from .common import CamelModel, validate_data_uri


class HomeworkFeedbackRequest(CamelModel):
    homework_image: str = Field(..., description="Photo of the homework as a base64 image data URI")
    subject: str = Field(..., min_length=1, max_length=100, description="e.g. Math, Science")

    @field_validator("homework_image")
    @classmethod
    def check_image(cls, value: str) -> str:
        return validate_data_uri(value, media="image")


class HomeworkFeedbackResponse(CamelModel):
    feedback: str = Field(..., description="The AI-generated feedback on the homework.")
    needs_illustration: bool = Field(
        ..., description="Whether an illustration would help explain a concept."
    )
    illustration_topic: Optional[str] = Field(
        None, description="The topic for which an illustration is suggested."
    )


class HomeworkTask(CamelModel):
    subject: str = Field(..., min_length=1, max_length=100)
    topic: str = Field(..., min_length=1, max_length=500)
    estimated_time: int = Field(..., ge=1, le=600, description="Estimated minutes for the task")


class HomeworkPlanRequest(CamelModel):
    student_name: str = Field(..., min_length=1, max_length=100)
    tasks: List[HomeworkTask] = Field(..., min_length=1, max_length=20)


class DraftPlanEntry(CamelModel):
    subject: str
    topic: str
    estimated_time: Optional[float] = None
    steps: List[str] = Field(
        default_factory=list,
        description='Simple, actionable steps (e.g. "Gather your notes and highlight 3 formulas").',
    )
    encouragement: str = Field(..., description="A short, encouraging message for this task.")


class HomeworkPlanDraft(CamelModel):
    """Shape requested from the model: one entry per task, same order as given."""
    plan: List[DraftPlanEntry]
    summary: str = Field(..., description="A brief, upbeat summary of the entire plan.")
    follow_up_question: Optional[str] = Field(
        None, description="An optional friendly follow-up question for the student."
    )


class HomeworkPlanEntry(CamelModel):
    subject: str
    topic: str
    estimated_time: int
    steps: List[str] = Field(default_factory=list)
    encouragement: str


class HomeworkPlanResponse(CamelModel):
    plan: List[HomeworkPlanEntry]
    summary: str
    follow_up_question: Optional[str] = None
