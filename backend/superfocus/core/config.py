"""
Environment configuration for the SuperFocus backend.

Values are read from the environment on every call (after loading .env once),
so a restarted worker or a patched environment is always picked up.
"""
import os
from typing import Dict, List, Optional

from dotenv import load_dotenv

load_dotenv()

# Keys the service cannot run without; grouped by the collaborator they belong to
REQUIRED_SETTINGS: Dict[str, List[str]] = {
    "supabase": ["NEXT_PUBLIC_SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_ANON_KEY", "SUPABASE_SERVICE_ROLE_KEY"],
    "stripe": ["STRIPE_SECRET_KEY", "STRIPE_PRICE_ID", "STRIPE_WEBHOOK_SECRET"],
    # TTS and illustrations only run on OpenAI, whichever provider serves chat
    "speech": ["OPENAI_API_KEY"],
    "redis": ["REDIS_URL", "REDIS_TOKEN"],
    "youtube": ["YOUTUBE_API_KEY"],
}

AI_PROVIDER_KEYS = ["ANTHROPIC_API_KEY", "AZURE_OPENAI_API_KEY", "DEEPSEEK_API_KEY", "OPENAI_API_KEY"]


def get_setting(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip()


def get_environment() -> str:
    return get_setting("ENVIRONMENT", "development")


def get_log_level() -> str:
    return get_setting("LOG_LEVEL", "INFO").upper()


def get_app_url() -> str:
    """Public site URL used for Stripe redirects."""
    return get_setting("NEXT_PUBLIC_APP_URL", "http://localhost:3000").rstrip("/")


def get_cors_origins() -> List[str]:
    raw = get_setting("CORS_ORIGINS")
    if not raw:
        return ["*"] if get_environment() == "development" else [get_app_url()]
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def get_supabase_url() -> Optional[str]:
    return get_setting("NEXT_PUBLIC_SUPABASE_URL")


def get_supabase_anon_key() -> Optional[str]:
    return get_setting("NEXT_PUBLIC_SUPABASE_ANON_KEY")


def get_supabase_service_key() -> Optional[str]:
    return get_setting("SUPABASE_SERVICE_ROLE_KEY")


def get_supabase_jwt_secret() -> Optional[str]:
    """Secret Supabase signs access tokens with; optional, only used to key the rate limiter."""
    return get_setting("SUPABASE_JWT_SECRET")


def get_stripe_secret_key() -> Optional[str]:
    return get_setting("STRIPE_SECRET_KEY")


def get_stripe_price_id() -> Optional[str]:
    return get_setting("STRIPE_PRICE_ID")


def get_stripe_webhook_secret() -> Optional[str]:
    return get_setting("STRIPE_WEBHOOK_SECRET")


def get_redis_url() -> Optional[str]:
    return get_setting("REDIS_URL")


def get_redis_token() -> Optional[str]:
    return get_setting("REDIS_TOKEN")


def get_youtube_api_key() -> Optional[str]:
    return get_setting("YOUTUBE_API_KEY")


def has_ai_provider() -> bool:
    if get_setting("AZURE_OPENAI_API_KEY") and not get_setting("AZURE_OPENAI_ENDPOINT"):
        return any(get_setting(key) for key in AI_PROVIDER_KEYS if key != "AZURE_OPENAI_API_KEY")
    return any(get_setting(key) for key in AI_PROVIDER_KEYS)


def missing_settings() -> Dict[str, List[str]]:
    """Return the absent required keys per collaborator (empty dict when fully configured)."""
    missing = {}
    for group, keys in REQUIRED_SETTINGS.items():
        absent = [key for key in keys if not get_setting(key)]
        if absent:
            missing[group] = absent
    if not has_ai_provider():
        missing["ai"] = ["one of " + ", ".join(AI_PROVIDER_KEYS)]
    return missing
