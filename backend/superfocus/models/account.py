from typing import Any, Dict, Optional

from pydantic import Field

from .common import CamelModel


class CheckoutSessionResponse(CamelModel):
    session_id: str
    url: Optional[str] = None


class PortalSessionResponse(CamelModel):
    url: str


class VoiceSettingsUpdate(CamelModel):
    user_id: str = Field(..., min_length=1)
    settings: Dict[str, Any]


class VoiceSettingsResponse(CamelModel):
    settings: Optional[Dict[str, Any]] = None
