from typing import List, Literal, Optional

from pydantic import Field, model_validator

from .common import CamelModel

MIN_ITEMS = 1
MAX_ITEMS = 10
OPTION_LETTERS = "ABCD"


class TestPrepRequest(CamelModel):
    subject: str = Field(..., min_length=1, max_length=100)
    topic: str = Field(..., min_length=1, max_length=200)
    type: Literal["quiz", "flashcards"]
    count: int = Field(..., ge=MIN_ITEMS, le=MAX_ITEMS)


class QuizQuestion(CamelModel):
    question: str = Field(..., min_length=1)
    options: List[str] = Field(..., min_length=4, max_length=4)
    answer: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def answer_is_an_option(self) -> "QuizQuestion":
        answer = self.answer.strip()
        if answer in self.options:
            self.answer = answer
            return self

        # Models sometimes answer with a differently-cased copy or the letter;
        # an option whose text matches wins over a letter reading
        for option in self.options:
            if option.strip().lower() == answer.lower():
                self.answer = option
                return self
        if len(answer) == 1 and answer.upper() in OPTION_LETTERS:
            self.answer = self.options[OPTION_LETTERS.index(answer.upper())]
            return self
        raise ValueError("answer must be one of the 4 options")


class Flashcard(CamelModel):
    term: str = Field(..., min_length=1)
    definition: str = Field(..., min_length=1)


class TestPrepResponse(CamelModel):
    quiz: Optional[List[QuizQuestion]] = None
    flashcards: Optional[List[Flashcard]] = None

    def items_for(self, material_type: str) -> List[CamelModel]:
        return list((self.quiz if material_type == "quiz" else self.flashcards) or [])


class QuizSubmitRequest(CamelModel):
    quiz_id: str = Field(..., min_length=1, max_length=64)
    answers: List[Optional[str]] = Field(..., max_length=MAX_ITEMS, description="One answer per question, null when skipped")
    time_spent_seconds: int = Field(..., ge=0)


class QuizSubmitResponse(CamelModel):
    score: float = Field(..., description="Percentage of correct answers, 0..100")
    correct_answers: int
    total_questions: int
