import logging
import time
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool

from superfocus.agents.test_prep_agent import generate_test_prep, score_quiz_answers
from superfocus.core.auth import AuthenticatedUser, get_current_user
from superfocus.core.errors import NotFoundError, UpstreamError
from superfocus.core.rate_limit import rate_limit_ai, rate_limit_api
from superfocus.models.test_prep import QuizSubmitRequest, TestPrepRequest, TestPrepResponse
from superfocus.services.profile_service import ProfileService

logger = logging.getLogger("superfocus.routes.quiz")

router = APIRouter()


async def save_quiz(user: AuthenticatedUser, request: TestPrepRequest, material: TestPrepResponse) -> Optional[str]:
    """Best-effort: the generated material is returned even when storage is down."""
    try:
        profiles = ProfileService()
    except UpstreamError:
        return None
    return await run_in_threadpool(
        profiles.record_quiz_result,
        user.id,
        request.subject,
        request.topic,
        request.type,
        material.model_dump(by_alias=True, exclude_none=True),
        request.count,
    )


@router.post("/quiz", dependencies=[Depends(rate_limit_ai)])
async def create_quiz(request: TestPrepRequest, user: AuthenticatedUser = Depends(get_current_user)):
    """
    Generate a quiz or flashcard deck with exactly `count` items.
    """
    started = time.perf_counter()
    material = await generate_test_prep(request)
    quiz_id = await save_quiz(user, request, material)

    logger.info(
        f"[Quiz] ✅ {request.count} {request.type} item(s) for {user.id} "
        f"in {time.perf_counter() - started:.2f}s"
    )
    return {
        "success": True,
        "data": material.model_dump(by_alias=True, exclude_none=True),
        "quizId": quiz_id,
    }


@router.post("/quiz/submit", dependencies=[Depends(rate_limit_api)])
async def submit_quiz(request: QuizSubmitRequest, user: AuthenticatedUser = Depends(get_current_user)):
    """
    Score a stored quiz and mark it completed for the signed-in user.
    """
    profiles = ProfileService()
    stored = await run_in_threadpool(profiles.get_quiz_result, request.quiz_id, user.id)
    if not stored:
        raise NotFoundError("Quiz not found")

    result = score_quiz_answers(stored.get("questions") or {}, request.answers)
    await run_in_threadpool(
        profiles.complete_quiz_result,
        request.quiz_id,
        user.id,
        {
            "answers": request.answers,
            "score": result.score,
            "correct_answers": result.correct_answers,
            "time_spent_seconds": request.time_spent_seconds,
        },
    )

    logger.info(f"[Quiz] 🏁 {user.id} scored {result.score}% on quiz {request.quiz_id}")
    return {"success": True, "data": result.model_dump(by_alias=True)}
