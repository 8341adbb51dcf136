"""clients for the external services the proxy forwards to"""

from ..config import Settings
from ..exceptions import ConfigurationError
from .emailjs import EmailJSClient
from .ocrspace import OCRSpaceRecognizer
from .recognizer import BaseRecognizer, normalize_text
from .ssllabs import SSLLabsClient, is_public_host, validate_public_host
from .vision import GoogleVisionRecognizer


def build_recognizer(settings: Settings) -> BaseRecognizer:
    """create the recognizer selected by settings.recognition_provider"""
    provider = settings.recognition_provider.lower()

    if provider == "ocrspace":
        return OCRSpaceRecognizer(
            api_key=settings.ocr_space_effective_key,
            api_url=settings.ocr_space_api_url,
            language=settings.ocr_space_language,
            engine=settings.ocr_space_engine,
            timeout=settings.upstream_timeout,
        )
    if provider == "vision":
        return GoogleVisionRecognizer(
            api_key=settings.google_vision_api_key,
            api_url=settings.google_vision_api_url,
            timeout=settings.upstream_timeout,
        )

    raise ConfigurationError(
        f"unknown recognition provider: {settings.recognition_provider}",
        details={"supported": ["ocrspace", "vision"]},
    )


__all__ = [
    "BaseRecognizer",
    "EmailJSClient",
    "GoogleVisionRecognizer",
    "OCRSpaceRecognizer",
    "SSLLabsClient",
    "build_recognizer",
    "is_public_host",
    "normalize_text",
    "validate_public_host",
]
