from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from superfocus.core.auth import AuthenticatedUser, get_current_user
from superfocus.core.rate_limit import rate_limit_api
from superfocus.models.account import VoiceSettingsResponse, VoiceSettingsUpdate
from superfocus.services.profile_service import ProfileService

router = APIRouter()


def _ensure_own_settings(user: AuthenticatedUser, user_id: str) -> None:
    if user_id != user.id:
        raise HTTPException(status_code=403, detail="Unauthorized")


@router.get("/user/voice-settings", response_model=VoiceSettingsResponse, dependencies=[Depends(rate_limit_api)])
def get_voice_settings(
    user_id: Optional[str] = Query(None, alias="userId"),
    user: AuthenticatedUser = Depends(get_current_user),
):
    """Get the saved voice settings; null when none were saved yet"""
    target = user_id or user.id
    _ensure_own_settings(user, target)
    return VoiceSettingsResponse(settings=ProfileService().get_voice_settings(target))


@router.post("/user/voice-settings", dependencies=[Depends(rate_limit_api)])
def save_voice_settings(request: VoiceSettingsUpdate, user: AuthenticatedUser = Depends(get_current_user)):
    _ensure_own_settings(user, request.user_id)
    ProfileService().save_voice_settings(request.user_id, request.settings)
    return {"success": True}
