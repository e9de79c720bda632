"""
Hosted model provider configuration.

The provider is picked from the environment, in priority order:
Anthropic > Azure OpenAI > DeepSeek > OpenAI.
"""
from dataclasses import dataclass
from typing import Optional

from anthropic import AsyncAnthropic
from openai import AsyncAzureOpenAI, AsyncOpenAI

from .config import get_setting
from .errors import AIConfigurationError

DEFAULT_ANTHROPIC_MODEL = "claude-sonnet-4-20250514"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_DEEPSEEK_MODEL = "deepseek-chat"
DEFAULT_AZURE_API_VERSION = "2024-02-15-preview"


@dataclass
class AIConfig:
    provider: str
    model: str
    client: Optional[AsyncOpenAI] = None
    anthropic_client: Optional[AsyncAnthropic] = None

    @property
    def is_anthropic(self) -> bool:
        return self.provider == "anthropic"


def get_ai_config() -> AIConfig:
    anthropic_key = get_setting("ANTHROPIC_API_KEY")
    if anthropic_key:
        return AIConfig(
            provider="anthropic",
            model=get_setting("ANTHROPIC_MODEL", DEFAULT_ANTHROPIC_MODEL),
            anthropic_client=AsyncAnthropic(api_key=anthropic_key),
        )

    azure_key = get_setting("AZURE_OPENAI_API_KEY")
    azure_endpoint = get_setting("AZURE_OPENAI_ENDPOINT")
    if azure_key and azure_endpoint:
        deployment = get_setting("AZURE_OPENAI_DEPLOYMENT", "gpt-4")
        return AIConfig(
            provider="azure",
            model=deployment,
            client=AsyncAzureOpenAI(
                api_key=azure_key,
                azure_endpoint=azure_endpoint.rstrip("/"),
                api_version=get_setting("AZURE_OPENAI_API_VERSION", DEFAULT_AZURE_API_VERSION),
            ),
        )

    deepseek_key = get_setting("DEEPSEEK_API_KEY")
    if deepseek_key:
        return AIConfig(
            provider="deepseek",
            model=get_setting("DEEPSEEK_MODEL", DEFAULT_DEEPSEEK_MODEL),
            client=AsyncOpenAI(
                api_key=deepseek_key,
                base_url=get_setting("DEEPSEEK_BASE_URL", "https://api.deepseek.com"),
            ),
        )

    openai_key = get_setting("OPENAI_API_KEY")
    if openai_key:
        return AIConfig(
            provider="openai",
            model=get_setting("OPENAI_MODEL", DEFAULT_OPENAI_MODEL),
            client=AsyncOpenAI(api_key=openai_key),
        )

    raise AIConfigurationError()


def get_openai_client() -> AsyncOpenAI:
    """OpenAI client for audio and image endpoints, which only OpenAI serves."""
    api_key = get_setting("OPENAI_API_KEY")
    if not api_key:
        raise AIConfigurationError("OPENAI_API_KEY is not configured; speech and illustration features need it.")
    return AsyncOpenAI(api_key=api_key)
