"""
Structured generation helper shared by every feature flow.

A flow hands over role-tagged messages and a pydantic schema; this module
adds the schema instructions, makes one call to the configured provider and
validates the reply. Provider failures surface as AIError, replies that do
not fit the schema as StructuredOutputError.
"""
import copy
import json
import logging
import re
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .errors import SuperFocusError, StructuredOutputError, classify_provider_error
from .llm_client import AIConfig, get_ai_config

logger = logging.getLogger("superfocus.generation")

Message = Dict[str, Any]
SchemaT = TypeVar("SchemaT", bound=BaseModel)

JSON_ONLY_INSTRUCTION = "You must respond with valid JSON only. No markdown, no explanations."
MAX_TOKENS = 4096


def format_image_content(data_uri: str) -> Dict[str, Any]:
    return {"type": "image_url", "image_url": {"url": data_uri}}


def build_user_message(text: str, image_data_uri: Optional[str] = None) -> Message:
    """User message, multi-part when an image data URI is attached."""
    if image_data_uri:
        return {
            "role": "user",
            "content": [
                {"type": "text", "text": text},
                format_image_content(image_data_uri),
            ],
        }
    return {"role": "user", "content": text}


def schema_instructions(schema: Type[BaseModel]) -> str:
    json_schema = json.dumps(schema.model_json_schema(by_alias=True), indent=2)
    return f"\n\nRespond with valid JSON matching this schema:\n{json_schema}"


def append_schema_instructions(messages: List[Message], schema: Type[BaseModel]) -> List[Message]:
    """Return a copy of `messages` whose last user turn carries the JSON schema."""
    enhanced = copy.deepcopy(messages)
    instructions = schema_instructions(schema)
    last = enhanced[-1]

    if last.get("role") != "user":
        enhanced.append({"role": "user", "content": instructions.strip()})
        return enhanced

    content = last.get("content")
    if isinstance(content, str):
        last["content"] = content + instructions
    elif isinstance(content, list):
        for part in content:
            if part.get("type") == "text":
                part["text"] = part.get("text", "") + instructions
                break
        else:
            content.insert(0, {"type": "text", "text": instructions.strip()})
    return enhanced


def convert_to_anthropic_messages(messages: List[Message]) -> Tuple[str, List[Message]]:
    """Split OpenAI-style messages into Anthropic's (system, messages) pair."""
    system_parts = []
    converted = []

    for message in messages:
        role = message.get("role")
        content = message.get("content")
        if role == "system":
            if isinstance(content, str):
                system_parts.append(content)
            continue
        if role not in ("user", "assistant"):
            continue

        if isinstance(content, str):
            converted.append({"role": role, "content": content})
            continue

        blocks = []
        for part in content or []:
            if part.get("type") == "text":
                blocks.append({"type": "text", "text": part.get("text", "")})
            elif part.get("type") == "image_url":
                url = (part.get("image_url") or {}).get("url", "")
                if url.startswith("data:") and "," in url:
                    header, data = url.split(",", 1)
                    media_type = header[len("data:"):].replace(";base64", "")
                    blocks.append({
                        "type": "image",
                        "source": {"type": "base64", "media_type": media_type, "data": data},
                    })
        converted.append({"role": role, "content": blocks})

    return "\n".join(system_parts).strip(), converted


def extract_json_text(raw: str) -> str:
    """Strip markdown fences or surrounding prose around a JSON object."""
    text = (raw or "").strip()
    if text.startswith("```"):
        lines = text.splitlines()[1:]
        if lines and lines[-1].strip().startswith("```"):
            lines = lines[:-1]
        text = "\n".join(lines).strip()
    if text and not text.startswith("{"):
        match = re.search(r"\{.*\}", text, flags=re.S)
        if match:
            text = match.group(0)
    return text or "{}"


def parse_structured_output(raw: str, schema: Type[SchemaT]) -> SchemaT:
    try:
        parsed = json.loads(extract_json_text(raw))
    except json.JSONDecodeError as e:
        raise StructuredOutputError(details=[{"type": "json_invalid", "msg": str(e)}]) from e

    try:
        return schema.model_validate(parsed)
    except ValidationError as e:
        raise StructuredOutputError(details=json.loads(e.json(include_url=False))) from e


async def _complete(
    config: AIConfig,
    messages: List[Message],
    model: str,
    temperature: float,
) -> str:
    try:
        if config.is_anthropic:
            system, anthropic_messages = convert_to_anthropic_messages(messages)
            system = f"{system}\n\n{JSON_ONLY_INSTRUCTION}".strip()
            kwargs: Dict[str, Any] = {
                "model": model,
                "max_tokens": MAX_TOKENS,
                "temperature": temperature,
                "messages": anthropic_messages,
            }
            if system:
                kwargs["system"] = system
            response = await config.anthropic_client.messages.create(**kwargs)
            return next((block.text for block in response.content if block.type == "text"), "")

        kwargs = {
            "model": model,
            "messages": messages,
            "temperature": temperature,
            "response_format": {"type": "json_object"},
        }
        completion = await config.client.chat.completions.create(**kwargs)
        if not completion.choices:
            return ""
        return completion.choices[0].message.content or ""
    except SuperFocusError:
        raise
    except Exception as e:
        logger.error(f"[Generation] ❌ {config.provider} call failed: {type(e).__name__}: {e}")
        raise classify_provider_error(e) from e


async def generate_structured(
    messages: List[Message],
    schema: Type[SchemaT],
    model: Optional[str] = None,
    temperature: float = 0.7,
) -> SchemaT:
    """
    Ask the configured model for JSON matching `schema` and validate it.

    Exactly one provider call is made; nothing is retried here.
    """
    if not messages:
        raise ValueError("generate_structured needs at least one message")

    config = get_ai_config()
    model_name = model or config.model
    logger.info(f"[Generation] 🔍 {config.provider}:{model_name} -> {schema.__name__}")

    enhanced = append_schema_instructions(messages, schema)
    raw = await _complete(config, enhanced, model_name, temperature)
    try:
        return parse_structured_output(raw, schema)
    except StructuredOutputError:
        logger.warning(f"[Generation] ⚠️ {schema.__name__} validation failed; raw reply {raw[:200]!r}")
        raise
