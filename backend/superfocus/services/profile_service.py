"""
Supabase-backed access to student profiles and quiz results
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from supabase import Client

from superfocus.core.errors import UpstreamError
from superfocus.supabase_config import get_supabase_client

logger = logging.getLogger("superfocus.services.profiles")

PROFILES_TABLE = "profiles"
QUIZ_RESULTS_TABLE = "quiz_results"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class ProfileService:
    """Service for reading and updating profile rows with the service-role client"""

    def __init__(self, client: Optional[Client] = None):
        if client is None:
            try:
                client = get_supabase_client()
            except ValueError as e:
                logger.error(f"[Profiles] ❌ Supabase not configured: {e}")
                raise UpstreamError("Profile storage unavailable") from e
        self.supabase = client

    def get_profile(self, user_id: str, columns: str = "*") -> Optional[Dict[str, Any]]:
        """Get a profile by user id, None when the row does not exist"""
        try:
            result = self.supabase.table(PROFILES_TABLE).select(columns).eq("id", user_id).limit(1).execute()
        except Exception as e:
            logger.error(f"[Profiles] ❌ Error getting profile {user_id}: {e}")
            raise UpstreamError("Failed to load profile") from e
        return result.data[0] if result.data else None

    def get_voice_settings(self, user_id: str) -> Optional[Dict[str, Any]]:
        profile = self.get_profile(user_id, "voice_settings")
        return profile.get("voice_settings") if profile else None

    def save_voice_settings(self, user_id: str, settings: Dict[str, Any]) -> None:
        try:
            self.supabase.table(PROFILES_TABLE).update({
                "voice_settings": settings,
                "updated_at": _now(),
            }).eq("id", user_id).execute()
        except Exception as e:
            logger.error(f"[Profiles] ❌ Error saving voice settings for {user_id}: {e}")
            raise UpstreamError("Failed to save voice settings") from e

    def update_subscription_by_email(self, email: str, fields: Dict[str, Any]) -> None:
        """Apply subscription fields to the profile owning `email`"""
        try:
            self.supabase.table(PROFILES_TABLE).update({**fields, "updated_at": _now()}).eq("email", email).execute()
        except Exception as e:
            logger.error(f"[Profiles] ❌ Failed to update subscription for {email}: {e}")
            raise UpstreamError("Failed to update subscription") from e

    def record_quiz_result(
        self,
        user_id: str,
        subject: str,
        topic: str,
        quiz_type: str,
        questions: Dict[str, Any],
        total_questions: int,
    ) -> Optional[str]:
        """Store generated material as an uncompleted quiz. Failures are logged, never raised."""
        try:
            result = self.supabase.table(QUIZ_RESULTS_TABLE).insert({
                "user_id": user_id,
                "subject": subject,
                "topic": topic,
                "quiz_type": quiz_type,
                "questions": questions,
                "total_questions": total_questions,
                "completed": False,
            }).execute()
            return str(result.data[0]["id"]) if result.data else None
        except Exception as e:
            logger.warning(f"[Profiles] ⚠️ Could not save quiz result for {user_id}: {e}")
            return None

    def get_quiz_result(self, quiz_id: str, user_id: str) -> Optional[Dict[str, Any]]:
        """Load a stored quiz, scoped to its owner"""
        try:
            result = (
                self.supabase.table(QUIZ_RESULTS_TABLE)
                .select("id, questions, total_questions, completed")
                .eq("id", quiz_id)
                .eq("user_id", user_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error(f"[Profiles] ❌ Failed to load quiz {quiz_id} for {user_id}: {e}")
            raise UpstreamError("Failed to load quiz") from e
        return result.data[0] if result.data else None

    def complete_quiz_result(self, quiz_id: str, user_id: str, fields: Dict[str, Any]) -> None:
        try:
            (
                self.supabase.table(QUIZ_RESULTS_TABLE)
                .update({**fields, "completed": True, "completed_at": _now()})
                .eq("id", quiz_id)
                .eq("user_id", user_id)
                .execute()
            )
        except Exception as e:
            logger.error(f"[Profiles] ❌ Failed to complete quiz {quiz_id}: {e}")
            raise UpstreamError("Failed to save quiz submission") from e

    def ping(self) -> Optional[str]:
        """Run a trivial query; returns the error message or None when healthy"""
        try:
            self.supabase.table(PROFILES_TABLE).select("id").limit(1).execute()
            return None
        except Exception as e:
            return str(e)
