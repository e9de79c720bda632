"""
Error taxonomy for the SuperFocus API.

Every error carries the HTTP status it maps to and a public message; the
handlers in superfocus.main render them as {"error": ..., "details": ...}.
"""
from datetime import datetime, timezone
from typing import Any, Dict, Optional


class SuperFocusError(Exception):
    status_code = 500
    public_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Any = None):
        super().__init__(message or self.public_message)
        self.message = message or self.public_message
        self.details = details

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class BadRequestError(SuperFocusError):
    status_code = 400
    public_message = "Invalid request data"


class NotFoundError(SuperFocusError):
    status_code = 404
    public_message = "Not found"


class AuthenticationError(SuperFocusError):
    status_code = 401
    public_message = "Not authenticated"


class RateLimitExceeded(SuperFocusError):
    status_code = 429
    public_message = "Too many requests"

    def __init__(self, limit: int, reset: float, retry_after: int):
        super().__init__(self.public_message)
        self.limit = limit
        self.reset = reset
        self.retry_after = retry_after

    def to_payload(self) -> Dict[str, Any]:
        return {
            "error": self.message,
            "message": "Rate limit exceeded. Please try again later.",
            "limit": self.limit,
            "remaining": 0,
            "reset": datetime.fromtimestamp(self.reset, tz=timezone.utc).isoformat(),
        }

    def headers(self) -> Dict[str, str]:
        return {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": "0",
            "X-RateLimit-Reset": str(int(self.reset)),
            "Retry-After": str(self.retry_after),
        }


class UpstreamError(SuperFocusError):
    """A hosted collaborator (model, payments, search) failed."""
    status_code = 502
    public_message = "Upstream service unavailable. Please try again later."


class AIConfigurationError(UpstreamError):
    public_message = (
        "No AI provider configured. Set one of: ANTHROPIC_API_KEY, DEEPSEEK_API_KEY, "
        "OPENAI_API_KEY, or AZURE_OPENAI_API_KEY"
    )


class AIError(UpstreamError):
    """Provider call failed; `retryable` tells the caller whether re-issuing may help."""

    def __init__(self, message: str, code: str, retryable: bool = False):
        super().__init__(message)
        self.code = code
        self.retryable = retryable

    def to_payload(self) -> Dict[str, Any]:
        return {"error": self.message, "details": {"code": self.code, "retryable": self.retryable}}


class StructuredOutputError(UpstreamError):
    """The model answered, but the answer did not fit the expected schema."""
    public_message = "The AI response could not be understood. Please try again."


class FeatureNotImplementedError(SuperFocusError):
    status_code = 501
    public_message = "This feature is not implemented"


def classify_provider_error(error: Exception) -> AIError:
    """Turn any SDK/network exception into an AIError with a stable code."""
    message = str(error) or error.__class__.__name__
    status = getattr(error, "status_code", None) or getattr(error, "status", None)
    lowered = message.lower()

    if status == 429 or "rate limit" in lowered:
        return AIError("Rate limit exceeded. Please try again in a moment.", "RATE_LIMIT", True)
    if status == 400 and "token" in lowered:
        return AIError("Input too long. Please shorten your message.", "TOKEN_LIMIT", False)
    if status == 401:
        return AIError("API authentication failed. Check your API key.", "AUTH_FAILED", False)
    if (isinstance(status, int) and status >= 500) or "timeout" in lowered or "timed out" in lowered or "network" in lowered or "connection" in lowered:
        return AIError("AI service temporarily unavailable.", "SERVER_ERROR", True)
    return AIError("AI request failed.", "UNKNOWN", False)
