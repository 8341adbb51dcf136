"""pydantic models for request/response schemas"""

from .common import ErrorResponse, HealthResponse
from .contact import ContactMessage, ContactResult
from .recognition import RecognitionRequest, RecognitionResult

__all__ = [
    "ContactMessage",
    "ContactResult",
    "ErrorResponse",
    "HealthResponse",
    "RecognitionRequest",
    "RecognitionResult",
]
