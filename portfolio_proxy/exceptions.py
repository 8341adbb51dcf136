"""
exceptions raised by the proxy services and their mapping to user-facing messages
"""

from enum import Enum


class ProxyError(Exception):
    """base exception for the proxy service"""

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class InputValidationError(ProxyError):
    """client supplied input that cannot be forwarded"""

    def __init__(self, message: str, details: dict | None = None, status_code: int = 400):
        super().__init__(message, details)
        self.status_code = status_code


class ConfigurationError(ProxyError):
    """a credential or endpoint required by an upstream service is missing"""


class UpstreamErrorCategory(str, Enum):
    """coarse failure categories of external services"""

    QUOTA_EXCEEDED = "quota_exceeded"
    INVALID_KEY = "invalid_key"
    NETWORK = "network"
    TIMEOUT = "timeout"
    BAD_RESPONSE = "bad_response"
    UPSTREAM = "upstream"


USER_MESSAGES: dict[UpstreamErrorCategory, str] = {
    UpstreamErrorCategory.QUOTA_EXCEEDED: "Service quota exceeded, please try again later",
    UpstreamErrorCategory.INVALID_KEY: "External service rejected the API key",
    UpstreamErrorCategory.NETWORK: "Network error while contacting the external service",
    UpstreamErrorCategory.TIMEOUT: "External service timed out",
    UpstreamErrorCategory.BAD_RESPONSE: "External service returned an unreadable response",
}


class UpstreamError(ProxyError):
    """external service answered with a failure or could not be reached"""

    def __init__(
        self,
        message: str,
        category: UpstreamErrorCategory = UpstreamErrorCategory.UPSTREAM,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.category = category

    def user_message(self, fallback: str) -> str:
        """generic message safe to return to the browser"""
        return USER_MESSAGES.get(self.category, fallback)


# google rpc status codes
_RPC_PERMISSION_DENIED = 7
_RPC_RESOURCE_EXHAUSTED = 8
_RPC_UNAUTHENTICATED = 16

_QUOTA_MARKERS = ("quota", "rate limit", "too many requests", "number of times")
_KEY_MARKERS = ("api key", "apikey", "api_key")


def classify_upstream_error(
    status_code: int | None = None,
    code: int | str | None = None,
    message: str | None = None,
) -> UpstreamErrorCategory:
    """
    map an upstream failure to a category

    explicit signals (http status, rpc code) win; the message text is only
    pattern matched when neither identifies the failure
    """
    if code in (_RPC_RESOURCE_EXHAUSTED, "RESOURCE_EXHAUSTED"):
        return UpstreamErrorCategory.QUOTA_EXCEEDED
    if code in (
        _RPC_UNAUTHENTICATED,
        _RPC_PERMISSION_DENIED,
        "UNAUTHENTICATED",
        "PERMISSION_DENIED",
    ):
        return UpstreamErrorCategory.INVALID_KEY

    if status_code == 429:
        return UpstreamErrorCategory.QUOTA_EXCEEDED
    if status_code == 401:
        return UpstreamErrorCategory.INVALID_KEY

    text = (message or "").lower()
    if any(marker in text for marker in _QUOTA_MARKERS):
        return UpstreamErrorCategory.QUOTA_EXCEEDED
    if any(marker in text for marker in _KEY_MARKERS):
        return UpstreamErrorCategory.INVALID_KEY

    # ocr.space answers 403 both for bad keys and for exhausted quotas
    if status_code == 403:
        return UpstreamErrorCategory.INVALID_KEY

    return UpstreamErrorCategory.UPSTREAM
