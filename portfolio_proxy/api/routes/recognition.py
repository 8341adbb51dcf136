import time

from fastapi import APIRouter, HTTPException

from ...config import settings
from ...dependencies import RecognizerDep
from ...exceptions import (
    ConfigurationError,
    InputValidationError,
    UpstreamError,
    UpstreamErrorCategory,
)
from ...logger import get_logger
from ...models import ErrorResponse, RecognitionRequest, RecognitionResult
from ...observability.metrics import (
    active_requests,
    record_duration,
    record_error,
    record_image_size,
    record_request,
)
from ...observability.telemetry import get_tracer
from ...services import normalize_text
from ...utils import (
    binarize_image,
    decode_base64_image,
    run_in_executor,
    validate_image_size,
)

logger = get_logger(__name__)
tracer = get_tracer(__name__)

router = APIRouter(tags=["recognition"])

ENDPOINT = "recognize_handwriting"
NO_IMAGE = "No image data provided"
GENERIC_FAILURE = "Failed to process handwriting"


@router.post(
    "/api/recognize-handwriting",
    response_model=RecognitionResult,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
@router.post(
    "/.netlify/functions/recognize-handwriting",
    response_model=RecognitionResult,
    response_model_exclude_none=True,
    include_in_schema=False,
)
async def recognize_handwriting(
    payload: RecognitionRequest | None = None,
    load_recognizer: RecognizerDep = None,
):
    """
    recognize handwritten text in a base64 image

    returns {text} with line breaks collapsed to spaces; an image without
    text gives {text: ""}
    """
    active_requests.labels(endpoint=ENDPOINT).inc()

    try:
        if payload is None or not payload.image or not payload.image.strip():
            logger.warning("recognition request without image")
            record_error(ENDPOINT, "missing_image")
            raise HTTPException(status_code=400, detail=NO_IMAGE)

        try:
            image_bytes = decode_base64_image(payload.image)
            validate_image_size(image_bytes, settings.max_image_size)
            recognizer, executor = load_recognizer()
            if payload.preprocess:
                image_bytes = await run_in_executor(
                    executor, binarize_image, image_bytes, settings.binarize_threshold
                )
        except InputValidationError as e:
            logger.warning("invalid recognition input", error=e.message, details=e.details)
            record_error(ENDPOINT, "invalid_input")
            raise HTTPException(status_code=e.status_code, detail=e.message) from None

        record_image_size(len(image_bytes))

        with tracer.start_as_current_span("api.recognize_handwriting") as span:
            span.set_attribute("image.size_bytes", len(image_bytes))
            span.set_attribute("recognition.provider", recognizer.name)
            span.set_attribute("recognition.preprocess", payload.preprocess)

            start_time = time.time()
            try:
                raw_text = await run_in_executor(executor, recognizer.recognize, image_bytes)
            except UpstreamError as e:
                logger.error(
                    "text recognition failed",
                    provider=recognizer.name,
                    category=e.category.value,
                    error=e.message,
                    details=e.details,
                )
                record_error(ENDPOINT, e.category.value)
                status_code = 504 if e.category is UpstreamErrorCategory.TIMEOUT else 500
                raise HTTPException(
                    status_code=status_code, detail=e.user_message(GENERIC_FAILURE)
                ) from e
            finally:
                record_duration(ENDPOINT, time.time() - start_time)

            text = normalize_text(raw_text)
            span.set_attribute("recognition.text_length", len(text))

        if not text:
            logger.info("no text detected", provider=recognizer.name)
            record_request(ENDPOINT, "empty")
            return RecognitionResult(text="", error=settings.no_text_hint)

        record_request(ENDPOINT, "success")
        logger.info(
            "recognition completed",
            provider=recognizer.name,
            image_size=len(image_bytes),
            text_length=len(text),
            processing_time_ms=round((time.time() - start_time) * 1000, 2),
        )
        return RecognitionResult(text=text)

    except (HTTPException, ConfigurationError):
        raise
    except Exception as e:
        logger.error("unexpected error in recognition endpoint", error=str(e), exc_info=True)
        record_error(ENDPOINT, "unexpected")
        raise HTTPException(status_code=500, detail=GENERIC_FAILURE) from e
    finally:
        active_requests.labels(endpoint=ENDPOINT).dec()
