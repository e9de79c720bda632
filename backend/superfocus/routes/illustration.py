import logging

from fastapi import APIRouter, Depends

from superfocus.agents.illustration_agent import generate_illustration
from superfocus.core.auth import AuthenticatedUser, get_current_user
from superfocus.core.rate_limit import rate_limit_ai
from superfocus.models.illustration import IllustrationRequest

logger = logging.getLogger("superfocus.routes.illustration")

router = APIRouter()


@router.post("/illustration", dependencies=[Depends(rate_limit_ai)])
async def create_illustration(request: IllustrationRequest, user: AuthenticatedUser = Depends(get_current_user)):
    """
    Draw an educational illustration of a topic in one of the preset styles.
    """
    result = await generate_illustration(request)
    logger.info(f"[Illustration] ✅ {request.style} illustration for {user.id}")
    return {"success": True, "data": result.model_dump(by_alias=True)}
