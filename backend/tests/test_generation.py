import asyncio
from types import SimpleNamespace

import pytest

from superfocus.core import generation
from superfocus.core.errors import AIError, StructuredOutputError
from superfocus.core.llm_client import AIConfig
from superfocus.models.tutor import JokeResponse
from conftest import IMAGE_URI


def test_schema_is_appended_to_last_user_message():
    messages = [
        {"role": "system", "content": "Be kind."},
        {"role": "user", "content": "Tell me a joke."},
    ]

    enhanced = generation.append_schema_instructions(messages, JokeResponse)

    assert enhanced[-1]["content"].startswith("Tell me a joke.")
    assert '"joke"' in enhanced[-1]["content"]
    # the caller's messages are left alone
    assert messages[-1]["content"] == "Tell me a joke."


def test_schema_goes_into_text_part_of_image_message():
    messages = [generation.build_user_message("Check this", IMAGE_URI)]

    enhanced = generation.append_schema_instructions(messages, JokeResponse)

    text_part, image_part = enhanced[0]["content"]
    assert "Respond with valid JSON" in text_part["text"]
    assert image_part == {"type": "image_url", "image_url": {"url": IMAGE_URI}}


def test_schema_added_as_new_message_after_assistant_turn():
    messages = [{"role": "assistant", "content": "Hi!"}]

    enhanced = generation.append_schema_instructions(messages, JokeResponse)

    assert len(enhanced) == 2
    assert enhanced[-1]["role"] == "user"


def test_fenced_reply_is_parsed():
    raw = 'Sure! ```json\n{"joke": "Why did the atom..."}\n```'

    result = generation.parse_structured_output(raw, JokeResponse)

    assert result.joke == "Why did the atom..."


def test_reply_missing_required_field_is_a_structured_output_error():
    with pytest.raises(StructuredOutputError) as info:
        generation.parse_structured_output('{"punchline": "no joke field"}', JokeResponse)

    assert info.value.status_code == 502
    assert info.value.details[0]["loc"] == ["joke"]


def test_invalid_json_is_a_structured_output_error():
    with pytest.raises(StructuredOutputError) as info:
        generation.parse_structured_output("not json at all", JokeResponse)

    assert info.value.details[0]["type"] == "json_invalid"


def test_generate_structured_makes_one_json_mode_call(fake_ai):
    fake_ai.reply({"joke": "Knock knock"})

    result = asyncio.run(generation.generate_structured(
        messages=[{"role": "user", "content": "joke please"}],
        schema=JokeResponse,
    ))

    assert result.joke == "Knock knock"
    assert len(fake_ai.calls) == 1
    assert fake_ai.calls[0]["response_format"] == {"type": "json_object"}
    assert fake_ai.calls[0]["model"] == "test-model"


def test_generate_structured_rejects_empty_messages(fake_ai):
    with pytest.raises(ValueError):
        asyncio.run(generation.generate_structured(messages=[], schema=JokeResponse))
    assert fake_ai.calls == []


def test_provider_failure_is_classified(fake_ai):
    fake_ai.reply(Exception("Rate limit reached for requests"))

    with pytest.raises(AIError) as info:
        asyncio.run(generation.generate_structured(
            messages=[{"role": "user", "content": "joke please"}],
            schema=JokeResponse,
        ))

    assert info.value.code == "RATE_LIMIT"
    assert info.value.retryable is True


class FakeAnthropicMessages:
    def __init__(self, reply):
        self.reply = reply
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if isinstance(self.reply, Exception):
            raise self.reply
        return self.reply


@pytest.fixture
def fake_anthropic(monkeypatch):
    def install(reply):
        messages = FakeAnthropicMessages(reply)
        monkeypatch.setattr(
            "superfocus.core.generation.get_ai_config",
            lambda: AIConfig(
                provider="anthropic",
                model="claude-test",
                anthropic_client=SimpleNamespace(messages=messages),
            ),
        )
        return messages

    return install


def test_anthropic_call_carries_json_instruction_and_image_blocks(fake_anthropic):
    messages = fake_anthropic(SimpleNamespace(content=[
        SimpleNamespace(type="thinking", text="ignored"),
        SimpleNamespace(type="text", text='{"joke": "Why was six afraid of seven?"}'),
    ]))

    result = asyncio.run(generation.generate_structured(
        messages=[
            {"role": "system", "content": "Be kind."},
            generation.build_user_message("What is in this picture?", IMAGE_URI),
        ],
        schema=JokeResponse,
    ))

    assert result.joke == "Why was six afraid of seven?"
    assert len(messages.calls) == 1
    call = messages.calls[0]
    assert call["model"] == "claude-test"
    assert call["max_tokens"] == generation.MAX_TOKENS
    assert call["system"].startswith("Be kind.")
    assert call["system"].endswith(generation.JSON_ONLY_INSTRUCTION)
    assert "response_format" not in call
    text_block, image_block = call["messages"][0]["content"]
    assert '"joke"' in text_block["text"]
    assert image_block == {
        "type": "image",
        "source": {"type": "base64", "media_type": "image/png", "data": "iVBORw0KGgo="},
    }


def test_anthropic_failure_is_classified(fake_anthropic):
    error = Exception("Overloaded")
    error.status_code = 529
    fake_anthropic(error)

    with pytest.raises(AIError) as info:
        asyncio.run(generation.generate_structured(
            messages=[{"role": "user", "content": "joke please"}],
            schema=JokeResponse,
        ))

    assert info.value.code == "SERVER_ERROR"
    assert info.value.retryable is True


def test_anthropic_messages_split_system_and_convert_images():
    system, messages = generation.convert_to_anthropic_messages([
        {"role": "system", "content": "Be kind."},
        generation.build_user_message("Look", IMAGE_URI),
    ])

    assert system == "Be kind."
    assert messages[0]["role"] == "user"
    assert any(part.get("type") == "image" for part in messages[0]["content"])
