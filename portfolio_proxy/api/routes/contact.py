from fastapi import APIRouter, HTTPException

from ...dependencies import EmailJSDep
from ...exceptions import ConfigurationError, UpstreamError, UpstreamErrorCategory
from ...logger import get_logger
from ...models import ContactMessage, ContactResult, ErrorResponse
from ...observability.metrics import active_requests, record_error, record_request
from ...utils import run_in_executor

logger = get_logger(__name__)

router = APIRouter(tags=["contact"])

ENDPOINT = "contact"
SEND_FAILURE = "Failed to send message"


@router.post(
    "/api/contact",
    response_model=ContactResult,
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
@router.post("/.netlify/functions/contact", response_model=ContactResult, include_in_schema=False)
async def send_contact_message(message: ContactMessage, load_emailjs: EmailJSDep = None):
    """forward a contact form message to emailjs"""
    active_requests.labels(endpoint=ENDPOINT).inc()

    try:
        client, executor = load_emailjs()
        await run_in_executor(executor, client.send, message.template_params())
    except ConfigurationError:
        raise
    except UpstreamError as e:
        logger.error("contact message not delivered", category=e.category.value, error=e.message)
        record_error(ENDPOINT, e.category.value)
        status_code = 504 if e.category is UpstreamErrorCategory.TIMEOUT else 500
        raise HTTPException(status_code=status_code, detail=e.user_message(SEND_FAILURE)) from e
    except Exception as e:
        logger.error("unexpected error in contact endpoint", error=str(e), exc_info=True)
        record_error(ENDPOINT, "unexpected")
        raise HTTPException(status_code=500, detail=SEND_FAILURE) from e
    finally:
        active_requests.labels(endpoint=ENDPOINT).dec()

    record_request(ENDPOINT, "success")
    logger.info("contact message relayed", sender=message.email)
    return ContactResult()
