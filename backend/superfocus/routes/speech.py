import logging
import time

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from superfocus.agents.speech_agent import speech_to_text, text_to_speech_stream
from superfocus.core.auth import AuthenticatedUser, get_current_user
from superfocus.core.rate_limit import rate_limit_ai
from superfocus.models.speech import SpeechToTextRequest, TextToSpeechRequest

logger = logging.getLogger("superfocus.routes.speech")

router = APIRouter()


@router.post("/stt", dependencies=[Depends(rate_limit_ai)])
async def transcribe(request: SpeechToTextRequest, user: AuthenticatedUser = Depends(get_current_user)):
    """
    Transcribe a recorded audio clip. Not available in this deployment: answers 501.
    """
    logger.info(f"[STT] 🎙️ Request from {user.id}")
    result = await speech_to_text(request)
    return {"success": True, "data": result.model_dump(by_alias=True)}


@router.post("/tts", dependencies=[Depends(rate_limit_ai)])
async def synthesize(request: TextToSpeechRequest, user: AuthenticatedUser = Depends(get_current_user)):
    """
    Stream synthesized speech as audio/mpeg.

    The first chunk is fetched before the response starts, so a provider
    failure still surfaces as a JSON error instead of a truncated stream.
    """
    started = time.perf_counter()
    stream = text_to_speech_stream(request)
    try:
        first_chunk = await stream.__anext__()
    except StopAsyncIteration:
        first_chunk = b""

    logger.info(
        f"[TTS] 🔊 Streaming for {user.id} ({len(request.text)} chars, "
        f"first byte after {time.perf_counter() - started:.2f}s)"
    )

    async def audio():
        try:
            if first_chunk:
                yield first_chunk
            async for chunk in stream:
                yield chunk
        finally:
            await stream.aclose()

    return StreamingResponse(audio(), media_type="audio/mpeg", headers={"Cache-Control": "no-cache"})
