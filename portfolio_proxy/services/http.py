import time
from typing import Any

import requests

from ..exceptions import UpstreamError, UpstreamErrorCategory
from ..logger import get_logger

logger = get_logger(__name__)


def send_request(
    session: requests.Session,
    method: str,
    url: str,
    timeout: float,
    service: str,
    **kwargs: Any,
) -> requests.Response:
    """
    issue one http request to an external service

    transport failures are turned into UpstreamError so callers only deal
    with one exception type; the response status is left to the caller
    """
    start_time = time.time()
    try:
        response = session.request(method, url, timeout=timeout, **kwargs)
    except requests.exceptions.Timeout as e:
        logger.error("upstream timeout", service=service, timeout=timeout, error=str(e))
        raise UpstreamError(
            f"{service} timed out after {timeout}s", UpstreamErrorCategory.TIMEOUT
        ) from e
    except requests.exceptions.RequestException as e:
        logger.error("upstream request failed", service=service, error=str(e))
        raise UpstreamError(
            f"{service} request failed: {e}", UpstreamErrorCategory.NETWORK
        ) from e

    logger.debug(
        "upstream responded",
        service=service,
        status_code=response.status_code,
        duration_ms=round((time.time() - start_time) * 1000, 2),
    )
    return response


def parse_json(response: requests.Response, service: str) -> Any:
    """decode a json body or raise a bad_response UpstreamError"""
    try:
        return response.json()
    except ValueError as e:
        logger.error(
            "upstream returned non-json body",
            service=service,
            status_code=response.status_code,
            body=response.text[:200],
        )
        raise UpstreamError(
            f"{service} returned invalid json: {e}",
            UpstreamErrorCategory.BAD_RESPONSE,
            details={"status_code": response.status_code},
        ) from e
