import ipaddress
import re
from typing import Any

import requests

from ..exceptions import InputValidationError
from ..logger import get_logger
from ..observability.telemetry import get_tracer
from .http import parse_json, send_request

logger = get_logger(__name__)
tracer = get_tracer(__name__)

SERVICE = "ssl labs"

PUBLIC_DOMAIN_ONLY = "SSL Labs only supports public domains."
MISSING_HOST = "Missing host parameter"

# dotted prefixes of loopback and rfc1918 ranges, checked on the raw name
_PRIVATE_PREFIX = re.compile(r"^(127\.|10\.|192\.168\.|172\.(1[6-9]|2[0-9]|3[0-1])\.)")


def _normalize_host(host: str) -> str:
    return host.strip().lower().rstrip(".")


def is_public_host(host: str) -> bool:
    """false for localhost, private/loopback prefixes and non-global ip literals"""
    name = _normalize_host(host)
    if not name:
        return False
    if name == "localhost" or name.endswith(".localhost"):
        return False
    if _PRIVATE_PREFIX.match(name):
        return False

    try:
        address = ipaddress.ip_address(name.strip("[]"))
    except ValueError:
        return True

    return not (
        address.is_private
        or address.is_loopback
        or address.is_link_local
        or address.is_reserved
        or address.is_multicast
        or address.is_unspecified
    )


def validate_public_host(host: str | None) -> str:
    """
    check a host before it is sent to ssl labs

    returns:
        the normalized host name

    raises:
        InputValidationError: host missing or not a public domain
    """
    if host is None or not host.strip():
        raise InputValidationError(MISSING_HOST)
    if not is_public_host(host):
        raise InputValidationError(PUBLIC_DOMAIN_ONLY, details={"host": host})
    return _normalize_host(host)


class SSLLabsClient:
    """client for the ssl labs v3 analyze endpoint"""

    def __init__(
        self,
        api_url: str,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ):
        self.api_url = api_url
        self.timeout = timeout
        self.session = session or requests.Session()

    def analyze(self, host: str) -> Any:
        """
        fetch the assessment of a host

        cached results are accepted and the report is not published; the
        json body is returned untouched, including ssl labs' own
        status: ERROR payloads

        args:
            host: validated public host name

        returns:
            decoded json body

        raises:
            UpstreamError: network failure or a non-json body
        """
        params = {
            "publish": "off",
            "fromCache": "on",
            "all": "done",
            "host": host,
        }

        with tracer.start_as_current_span("ssllabs.analyze") as span:
            span.set_attribute("ssl.host", host)

            response = send_request(
                self.session, "GET", self.api_url, self.timeout, SERVICE, params=params
            )
            data = parse_json(response, SERVICE)

            span.set_attribute("http.upstream_status", response.status_code)

        logger.info(
            "ssl labs assessment fetched",
            host=host,
            upstream_status=response.status_code,
            assessment_status=data.get("status") if isinstance(data, dict) else None,
        )
        return data

    def shutdown(self) -> None:
        """release the http session"""
        self.session.close()
