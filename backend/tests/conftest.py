import json
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from superfocus.core.auth import AuthenticatedUser, get_current_user
from superfocus.core.llm_client import AIConfig
from superfocus.main import app

ENV_KEYS = [
    "ANTHROPIC_API_KEY",
    "OPENAI_API_KEY",
    "DEEPSEEK_API_KEY",
    "AZURE_OPENAI_API_KEY",
    "AZURE_OPENAI_ENDPOINT",
    "NEXT_PUBLIC_SUPABASE_URL",
    "NEXT_PUBLIC_SUPABASE_ANON_KEY",
    "SUPABASE_SERVICE_ROLE_KEY",
    "SUPABASE_JWT_SECRET",
    "STRIPE_SECRET_KEY",
    "STRIPE_PRICE_ID",
    "STRIPE_WEBHOOK_SECRET",
    "REDIS_URL",
    "REDIS_TOKEN",
    "YOUTUBE_API_KEY",
    "NEXT_PUBLIC_APP_URL",
]

TEST_USER = AuthenticatedUser(id="user-123", email="student@example.com")

IMAGE_URI = "data:image/png;base64,iVBORw0KGgo="
AUDIO_URI = "data:audio/webm;codecs=opus;base64,GkXfow=="


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """No test talks to a real provider, Redis, Supabase or Stripe."""
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


class FakeCompletions:
    def __init__(self):
        self.replies = []
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=reply))])


class FakeProvider:
    """Stands in for an OpenAI-compatible chat client; replies are queued with `reply`."""

    def __init__(self):
        self.completions = FakeCompletions()
        self.client = SimpleNamespace(chat=SimpleNamespace(completions=self.completions))

    def reply(self, *payloads):
        for payload in payloads:
            if isinstance(payload, (str, Exception)):
                self.completions.replies.append(payload)
            else:
                self.completions.replies.append(json.dumps(payload))

    @property
    def calls(self):
        return self.completions.calls


@pytest.fixture
def fake_ai(monkeypatch):
    provider = FakeProvider()
    monkeypatch.setattr(
        "superfocus.core.generation.get_ai_config",
        lambda: AIConfig(provider="openai", model="test-model", client=provider.client),
    )
    return provider


@pytest.fixture
def client():
    app.dependency_overrides[get_current_user] = lambda: TEST_USER
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def anon_client():
    app.dependency_overrides.clear()
    return TestClient(app)
