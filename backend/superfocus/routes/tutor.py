import logging
import time

from fastapi import APIRouter, Depends

from superfocus.agents.tutor_agent import connect_with_tutor, tell_joke
from superfocus.core.auth import AuthenticatedUser, get_current_user
from superfocus.core.rate_limit import rate_limit_ai
from superfocus.models.tutor import JokeRequest, TutorRequest

logger = logging.getLogger("superfocus.routes.tutor")

router = APIRouter()


@router.post("/tutor", dependencies=[Depends(rate_limit_ai)])
async def ask_tutor(request: TutorRequest, user: AuthenticatedUser = Depends(get_current_user)):
    started = time.perf_counter()
    answer = await connect_with_tutor(request)
    logger.info(f"[Tutor] ✅ {request.subject} answer for {user.id} in {time.perf_counter() - started:.2f}s")
    return {"success": True, "data": answer.model_dump(by_alias=True)}


@router.post("/joke", dependencies=[Depends(rate_limit_ai)])
async def joke(request: JokeRequest, user: AuthenticatedUser = Depends(get_current_user)):
    result = await tell_joke(request)
    return {"success": True, "data": result.model_dump(by_alias=True)}
