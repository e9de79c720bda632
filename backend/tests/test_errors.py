from superfocus.core.errors import RateLimitExceeded, classify_provider_error


class ProviderError(Exception):
    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


def test_classify_rate_limit_by_status():
    error = classify_provider_error(ProviderError("slow down", status_code=429))
    assert (error.code, error.retryable, error.status_code) == ("RATE_LIMIT", True, 502)


def test_classify_token_limit():
    error = classify_provider_error(ProviderError("maximum context length in tokens exceeded", status_code=400))
    assert error.code == "TOKEN_LIMIT"
    assert error.retryable is False


def test_classify_auth_failure():
    assert classify_provider_error(ProviderError("bad key", status_code=401)).code == "AUTH_FAILED"


def test_classify_server_and_network_errors_as_retryable():
    assert classify_provider_error(ProviderError("boom", status_code=503)).retryable is True
    assert classify_provider_error(TimeoutError("Request timed out")).code == "SERVER_ERROR"


def test_classify_unknown():
    error = classify_provider_error(ValueError("something odd"))
    assert error.code == "UNKNOWN"
    assert error.to_payload() == {
        "error": "AI request failed.",
        "details": {"code": "UNKNOWN", "retryable": False},
    }


def test_rate_limit_payload_and_headers():
    error = RateLimitExceeded(limit=20, reset=1700000000, retry_after=42)

    payload = error.to_payload()
    assert payload["error"] == "Too many requests"
    assert payload["remaining"] == 0
    assert payload["reset"].startswith("2023-11-14T22:13:20")
    assert error.headers()["Retry-After"] == "42"
    assert error.headers()["X-RateLimit-Limit"] == "20"
