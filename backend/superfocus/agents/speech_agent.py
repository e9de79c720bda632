"""
Speech flows.

Text-to-speech streams OpenAI TTS audio straight through to the caller.
Speech-to-text needs a dedicated hosted transcription service that is not
wired into this deployment, so it refuses every request explicitly.
"""
import logging
from typing import AsyncIterator

from superfocus.core.errors import FeatureNotImplementedError, SuperFocusError, classify_provider_error
from superfocus.core.llm_client import get_openai_client
from superfocus.models.speech import SpeechToTextRequest, SpeechToTextResponse, TextToSpeechRequest

logger = logging.getLogger("superfocus.agents.speech")

TTS_MODEL = "tts-1"
TTS_FORMAT = "mp3"
CHUNK_SIZE = 4096

SPEECH_TO_TEXT_UNAVAILABLE = (
    "Speech-to-text is not implemented: it requires a hosted transcription service "
    "that is not configured for this deployment."
)


async def speech_to_text(request: SpeechToTextRequest) -> SpeechToTextResponse:
    logger.warning(f"[SpeechAgent] ⚠️ Speech-to-text requested (language={request.language}); not available")
    raise FeatureNotImplementedError(SPEECH_TO_TEXT_UNAVAILABLE)


async def text_to_speech_stream(request: TextToSpeechRequest) -> AsyncIterator[bytes]:
    """
    Yield mp3 chunks as the provider produces them.

    Closing the generator (for example when the client disconnects) exits the
    streaming context and releases the upstream connection.
    """
    client = get_openai_client()
    logger.info(f"[SpeechAgent] 🔊 TTS {len(request.text)} chars voice={request.voice} speed={request.speed}")

    try:
        async with client.audio.speech.with_streaming_response.create(
            model=TTS_MODEL,
            voice=request.voice,
            input=request.text,
            speed=request.speed,
            response_format=TTS_FORMAT,
        ) as response:
            async for chunk in response.iter_bytes(CHUNK_SIZE):
                if chunk:
                    yield chunk
    except SuperFocusError:
        raise
    except Exception as e:
        logger.error(f"[SpeechAgent] ❌ TTS streaming failed: {type(e).__name__}: {e}")
        raise classify_provider_error(e) from e
