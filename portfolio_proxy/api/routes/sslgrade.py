import time

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import JSONResponse

from ...dependencies import SSLLabsDep
from ...exceptions import InputValidationError, UpstreamError, UpstreamErrorCategory
from ...logger import get_logger
from ...models import ErrorResponse
from ...observability.metrics import active_requests, record_duration, record_error, record_request
from ...services import validate_public_host
from ...utils import run_in_executor

logger = get_logger(__name__)

router = APIRouter(tags=["ssl"])

ENDPOINT = "sslgrade"


@router.get(
    "/.netlify/functions/sslgrade",
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
@router.get("/api/sslgrade", include_in_schema=False)
async def ssl_grade(
    host: str | None = Query(default=None, description="public host name to assess"),
    ssl_deps: SSLLabsDep = None,
):
    """relay the ssl labs assessment of a public host"""
    client, executor = ssl_deps
    active_requests.labels(endpoint=ENDPOINT).inc()

    try:
        try:
            target = validate_public_host(host)
        except InputValidationError as e:
            logger.warning("rejected ssl grade host", host=host, error=e.message)
            record_error(ENDPOINT, "invalid_host")
            raise HTTPException(status_code=400, detail=e.message) from None

        start_time = time.time()
        try:
            data = await run_in_executor(executor, client.analyze, target)
        except UpstreamError as e:
            logger.error("ssl labs request failed", host=target, error=e.message)
            record_error(ENDPOINT, e.category.value)
            status_code = 504 if e.category is UpstreamErrorCategory.TIMEOUT else 500
            raise HTTPException(status_code=status_code, detail=e.message) from e
        finally:
            record_duration(ENDPOINT, time.time() - start_time)

        record_request(ENDPOINT, "success")
        return JSONResponse(content=data)

    except HTTPException:
        raise
    except Exception as e:
        logger.error("unexpected error in sslgrade endpoint", error=str(e), exc_info=True)
        record_error(ENDPOINT, "unexpected")
        raise HTTPException(status_code=500, detail=str(e) or "internal server error") from e
    finally:
        active_requests.labels(endpoint=ENDPOINT).dec()
