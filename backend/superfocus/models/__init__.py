from .common import CamelModel
from .homework import (
    HomeworkFeedbackRequest,
    HomeworkFeedbackResponse,
    HomeworkPlanRequest,
    HomeworkPlanResponse,
)
from .illustration import IllustrationRequest, IllustrationResponse
from .test_prep import QuizSubmitRequest, QuizSubmitResponse, TestPrepRequest, TestPrepResponse
from .speech import SpeechToTextRequest, SpeechToTextResponse, TextToSpeechRequest
from .tutor import JokeRequest, JokeResponse, TutorRequest, TutorResponse
from .youtube import YouTubeSearchResponse, YouTubeVideo

__all__ = [
    "CamelModel",
    "HomeworkFeedbackRequest",
    "HomeworkFeedbackResponse",
    "HomeworkPlanRequest",
    "HomeworkPlanResponse",
    "IllustrationRequest",
    "IllustrationResponse",
    "TestPrepRequest",
    "TestPrepResponse",
    "QuizSubmitRequest",
    "QuizSubmitResponse",
    "SpeechToTextRequest",
    "SpeechToTextResponse",
    "TextToSpeechRequest",
    "JokeRequest",
    "JokeResponse",
    "TutorRequest",
    "TutorResponse",
    "YouTubeSearchResponse",
    "YouTubeVideo",
]
