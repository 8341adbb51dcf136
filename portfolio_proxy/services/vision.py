import base64

import requests

from ..exceptions import ConfigurationError, UpstreamError, classify_upstream_error
from ..logger import get_logger
from ..observability.telemetry import get_tracer
from .http import parse_json, send_request
from .recognizer import BaseRecognizer

logger = get_logger(__name__)
tracer = get_tracer(__name__)

SERVICE = "google vision"


class GoogleVisionRecognizer(BaseRecognizer):
    """text recognition through the google cloud vision rest api (document text detection)"""

    name = "vision"

    def __init__(
        self,
        api_key: str,
        api_url: str,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ):
        if not api_key:
            raise ConfigurationError("google vision api key is not configured")
        super().__init__(timeout, session)
        self.api_key = api_key
        self.api_url = api_url

    def recognize(self, image_bytes: bytes) -> str:
        payload = {
            "requests": [
                {
                    "image": {"content": base64.b64encode(image_bytes).decode("ascii")},
                    "features": [{"type": "DOCUMENT_TEXT_DETECTION"}],
                }
            ]
        }

        with tracer.start_as_current_span("vision.recognize") as span:
            span.set_attribute("image.size_bytes", len(image_bytes))

            response = send_request(
                self.session,
                "POST",
                self.api_url,
                self.timeout,
                SERVICE,
                params={"key": self.api_key},
                json=payload,
            )
            body = parse_json(response, SERVICE)

            # request level failure: {"error": {"code": 403, "status": "PERMISSION_DENIED", ...}}
            error = body.get("error") if isinstance(body, dict) else None
            if error or response.status_code != 200:
                error = error or {}
                self._raise(response.status_code, error.get("status"), error.get("message"))

            responses = body.get("responses") or [{}]
            annotation = responses[0]

            # per image failure carries a google rpc code
            if annotation.get("error"):
                image_error = annotation["error"]
                self._raise(
                    response.status_code, image_error.get("code"), image_error.get("message")
                )

            full_text = annotation.get("fullTextAnnotation") or {}
            text = full_text.get("text") or ""

            span.set_attribute("ocr.text_length", len(text))

        logger.info("vision recognition completed", text_length=len(text))
        return text

    @staticmethod
    def _raise(status_code: int, code, message: str | None):
        category = classify_upstream_error(status_code=status_code, code=code, message=message)
        logger.error(
            "vision request failed",
            status_code=status_code,
            code=code,
            error=message,
            category=category.value,
        )
        raise UpstreamError(
            f"google vision failed: {message or status_code}",
            category,
            details={"status_code": status_code, "code": code},
        )
