import requests

from ..exceptions import UpstreamError, UpstreamErrorCategory, classify_upstream_error
from ..logger import get_logger
from ..observability.telemetry import get_tracer
from ..utils.image_utils import to_data_url
from .http import send_request
from .recognizer import BaseRecognizer

logger = get_logger(__name__)
tracer = get_tracer(__name__)

SERVICE = "ocr.space"


def _join_error_message(value) -> str:
    """ocr.space returns ErrorMessage either as a string or a list of strings"""
    if not value:
        return ""
    if isinstance(value, list):
        return "; ".join(str(item) for item in value if item)
    return str(value)


class OCRSpaceRecognizer(BaseRecognizer):
    """
    text recognition through the ocr.space parse api

    the image is sent as a base64 data url in a form field; engine 2 is
    the one that copes best with handwriting
    """

    name = "ocrspace"

    def __init__(
        self,
        api_key: str,
        api_url: str,
        language: str = "eng",
        engine: int = 2,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ):
        super().__init__(timeout, session)
        self.api_key = api_key
        self.api_url = api_url
        self.language = language
        self.engine = engine

    def recognize(self, image_bytes: bytes) -> str:
        payload = {
            "apikey": self.api_key,
            "base64Image": to_data_url(image_bytes),
            "language": self.language,
            "OCREngine": str(self.engine),
            "scale": "true",
            "isOverlayRequired": "false",
        }

        with tracer.start_as_current_span("ocrspace.recognize") as span:
            span.set_attribute("image.size_bytes", len(image_bytes))
            span.set_attribute("ocr.engine", self.engine)

            response = send_request(
                self.session, "POST", self.api_url, self.timeout, SERVICE, data=payload
            )

            try:
                body = response.json()
            except ValueError:
                # rejected keys and quota overruns come back as plain text
                text = response.text.strip()
                category = classify_upstream_error(status_code=response.status_code, message=text)
                if category is UpstreamErrorCategory.UPSTREAM:
                    category = UpstreamErrorCategory.BAD_RESPONSE
                logger.error(
                    "ocr.space returned non-json body",
                    status_code=response.status_code,
                    body=text[:200],
                    category=category.value,
                )
                raise UpstreamError(
                    f"ocr.space error {response.status_code}: {text[:200]}",
                    category,
                    details={"status_code": response.status_code},
                ) from None

            if not isinstance(body, dict):
                raise UpstreamError(
                    "ocr.space returned an unexpected payload", UpstreamErrorCategory.BAD_RESPONSE
                )

            if response.status_code != 200 or body.get("IsErroredOnProcessing"):
                message = _join_error_message(body.get("ErrorMessage")) or _join_error_message(
                    body.get("ErrorDetails")
                )
                category = classify_upstream_error(
                    status_code=response.status_code, message=message
                )
                logger.error(
                    "ocr.space processing failed",
                    status_code=response.status_code,
                    exit_code=body.get("OCRExitCode"),
                    error=message,
                    category=category.value,
                )
                raise UpstreamError(
                    f"ocr.space failed: {message or response.status_code}",
                    category,
                    details={"exit_code": body.get("OCRExitCode")},
                )

            results = body.get("ParsedResults") or []
            texts = [result.get("ParsedText") or "" for result in results]
            text = "\n".join(part for part in texts if part)

            span.set_attribute("ocr.text_length", len(text))

        logger.info(
            "ocr.space recognition completed",
            text_length=len(text),
            processing_time_ms=body.get("ProcessingTimeInMilliseconds"),
        )
        return text
