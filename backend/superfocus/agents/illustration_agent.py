"""
Educational illustrations drawn with DALL-E 3.

The prompt is screened by the moderation endpoint first; a flagged prompt is
refused, while a moderation outage only logs and lets generation go ahead.
"""
import logging

from superfocus.core.errors import BadRequestError, SuperFocusError, UpstreamError, classify_provider_error
from superfocus.core.llm_client import get_openai_client
from superfocus.models.illustration import IllustrationRequest, IllustrationResponse

logger = logging.getLogger("superfocus.agents.illustration")

IMAGE_MODEL = "dall-e-3"

STYLE_PRESETS = {
    "diagram": "Clean, simple diagram with clear labels and arrows, suitable for textbooks. Minimal colors, high contrast.",
    "realistic": "Photorealistic educational illustration with accurate details and natural lighting.",
    "cartoon": "Friendly cartoon style with vibrant colors, perfect for younger students. Approachable and fun.",
    "sketch": "Hand-drawn sketch style with pencil-like texture, ideal for concept illustrations.",
}


def build_illustration_prompt(topic: str, style: str) -> str:
    return (
        f"Educational illustration: {topic}. "
        f"Style: {STYLE_PRESETS[style]} "
        "Requirements: Clear, accurate, suitable for students, no text in image, "
        "safe for all ages, focused on learning."
    )


async def _check_moderation(client, prompt: str) -> None:
    try:
        moderation = await client.moderations.create(input=prompt)
    except Exception as e:
        logger.warning(f"[IllustrationAgent] ⚠️ Moderation check failed, continuing: {type(e).__name__}: {e}")
        return

    result = moderation.results[0]
    if result.flagged:
        categories = [name for name, flagged in result.categories.model_dump().items() if flagged]
        logger.warning(f"[IllustrationAgent] 🚫 Prompt flagged: {categories}")
        raise BadRequestError(f"Content policy violation detected: {', '.join(categories)}")


async def generate_illustration(request: IllustrationRequest) -> IllustrationResponse:
    topic = request.topic.strip()
    client = get_openai_client()
    prompt = build_illustration_prompt(topic, request.style)
    logger.info(f"[IllustrationAgent] 🎨 Illustrating {topic!r} ({request.style}, {request.size})")

    await _check_moderation(client, prompt)

    try:
        image = await client.images.generate(
            model=IMAGE_MODEL,
            prompt=prompt,
            n=1,
            size=request.size,
            quality="standard",
            style="natural",
        )
    except SuperFocusError:
        raise
    except Exception as e:
        logger.error(f"[IllustrationAgent] ❌ Image generation failed: {type(e).__name__}: {e}")
        raise classify_provider_error(e) from e

    first = image.data[0] if image.data else None
    if first is None or not first.url:
        raise UpstreamError("Failed to generate image - no URL returned")

    return IllustrationResponse(
        image_url=first.url,
        revised_prompt=first.revised_prompt or prompt,
        explanation=(
            f"This educational illustration depicts {topic} in a {request.style} style. "
            "The image is designed to help students understand the concept visually."
        ),
    )
