# error taxonomy for the gateway and the classifier that maps
# provider-native failures (httpx status errors, transport errors) onto it

from typing import Any, Dict, List, Optional

import httpx

PROVIDER_LABELS = {
    "gemini": "Google Gemini",
    "openai": "OpenAI",
    "anthropic": "Anthropic",
}


class GatewayError(Exception):
    pass


# --- pre-dispatch ---

class MalformedInput(GatewayError):
    status_code = 400

    def __init__(self, message: str = "Invalid JSON input") -> None:
        super().__init__(message)
        self.message = message


class SchemaViolation(GatewayError):
    status_code = 422

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.errors = errors or []


# --- dispatch ---

class ProviderError(GatewayError):
    """Base for failures raised by an upstream provider call.

    ``status_hint`` is the upstream HTTP status when one was observed; the
    gateway itself always answers dispatch failures with 500.
    """

    kind = "UnknownProviderError"

    def __init__(self, message: str, *, provider: str = "", status_hint: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.provider = provider
        self.status_hint = status_hint


class ProviderAuthError(ProviderError):
    kind = "ProviderAuthError"


class ProviderRateLimited(ProviderError):
    kind = "ProviderRateLimited"


class ProviderUnavailable(ProviderError):
    kind = "ProviderUnavailable"


class UnknownProviderError(ProviderError):
    kind = "UnknownProviderError"


# logged only, never raised to the caller
MID_STREAM_TRUNCATION = "MidStreamTruncation"

_AUTH_TYPES = {
    "authentication_error", "permission_error", "invalid_api_key",
    "PERMISSION_DENIED", "UNAUTHENTICATED", "API_KEY_INVALID", "API_KEY_SERVICE_BLOCKED",
}
_RATE_TYPES = {"rate_limit_error", "rate_limit_exceeded", "insufficient_quota", "RESOURCE_EXHAUSTED"}
_UNAVAILABLE_TYPES = {"overloaded_error", "api_error", "UNAVAILABLE", "INTERNAL", "DEADLINE_EXCEEDED"}


def _error_body(response: httpx.Response) -> Dict[str, Any]:
    # all three providers nest their error as {"error": {...}}
    try:
        data = response.json()
    except ValueError:
        return {}
    if not isinstance(data, dict):
        return {}
    err = data.get("error")
    return err if isinstance(err, dict) else {}


def _error_type(err: Dict[str, Any]) -> str:
    # gemini: details[].reason, then status; anthropic: type; openai: type/code
    details = err.get("details")
    if isinstance(details, list):
        for d in details:
            reason = d.get("reason") if isinstance(d, dict) else None
            if isinstance(reason, str) and reason:
                return reason
    for key in ("type", "code", "status"):
        val = err.get(key)
        if isinstance(val, str) and val:
            return val
    return ""


def _label(provider: str) -> str:
    return PROVIDER_LABELS.get(provider, provider or "Provider")


def classify_status(status: Optional[int], error_type: str = "") -> type:
    if error_type in _AUTH_TYPES or status in (401, 403):
        return ProviderAuthError
    if error_type in _RATE_TYPES or status == 429:
        return ProviderRateLimited
    if error_type in _UNAVAILABLE_TYPES or status in (408, 529) or (status is not None and status >= 500):
        return ProviderUnavailable
    return UnknownProviderError


def classify_provider_error(provider: str, exc: BaseException) -> ProviderError:
    """Map any exception from an adapter onto the provider error taxonomy."""
    if isinstance(exc, ProviderError):
        if not exc.provider:
            exc.provider = provider
        return exc

    label = _label(provider)

    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        err = _error_body(exc.response)
        detail = err.get("message") if isinstance(err.get("message"), str) else ""
        if not detail:
            detail = exc.response.reason_phrase or "request failed"
        cls = classify_status(status, _error_type(err))
        return cls(f"{label} Error ({status}): {detail}", provider=provider, status_hint=status)

    if isinstance(exc, httpx.TimeoutException):
        return ProviderUnavailable(f"{label} Error: request timed out", provider=provider)

    if isinstance(exc, httpx.TransportError):
        return ProviderUnavailable(f"{label} Error: {exc}", provider=provider)

    message = str(exc) or exc.__class__.__name__
    return UnknownProviderError(f"{label} Error: {message}", provider=provider)
