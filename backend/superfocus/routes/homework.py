import logging
import time

from fastapi import APIRouter, Depends

from superfocus.agents.homework_agent import create_homework_plan, get_homework_feedback
from superfocus.core.auth import AuthenticatedUser, get_current_user
from superfocus.core.rate_limit import rate_limit_ai
from superfocus.models.homework import HomeworkFeedbackRequest, HomeworkPlanRequest

logger = logging.getLogger("superfocus.routes.homework")

router = APIRouter()


@router.post("/feedback", dependencies=[Depends(rate_limit_ai)])
async def homework_feedback(request: HomeworkFeedbackRequest, user: AuthenticatedUser = Depends(get_current_user)):
    """
    Review a photo of a student's homework and give encouraging feedback.
    """
    started = time.perf_counter()
    feedback = await get_homework_feedback(request)
    logger.info(f"[Homework] ✅ Feedback for {user.id} ({request.subject}) in {time.perf_counter() - started:.2f}s")
    return {"success": True, "data": feedback.model_dump(by_alias=True)}


@router.post("/plan", dependencies=[Depends(rate_limit_ai)])
async def homework_plan(request: HomeworkPlanRequest, user: AuthenticatedUser = Depends(get_current_user)):
    """
    Break a list of homework tasks into an ordered plan, one entry per task.
    """
    started = time.perf_counter()
    plan = await create_homework_plan(request)
    logger.info(
        f"[Homework] ✅ Plan of {len(plan.plan)} task(s) for {user.id} in {time.perf_counter() - started:.2f}s"
    )
    return {"success": True, "data": plan.model_dump(by_alias=True)}
