import requests

from ..exceptions import ConfigurationError, UpstreamError, classify_upstream_error
from ..logger import get_logger
from ..observability.telemetry import get_tracer
from .http import send_request

logger = get_logger(__name__)
tracer = get_tracer(__name__)

SERVICE = "emailjs"


class EmailJSClient:
    """
    sends contact form messages through the emailjs rest api

    the private key is passed as accessToken so the call is accepted from
    a server; emailjs answers 200 with a plain "OK" body on success
    """

    def __init__(
        self,
        api_url: str,
        service_id: str,
        template_id: str,
        public_key: str,
        private_key: str = "",
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ):
        missing = [
            name
            for name, value in (
                ("service_id", service_id),
                ("template_id", template_id),
                ("public_key", public_key),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(
                "emailjs is not configured", details={"missing": missing}
            )

        self.api_url = api_url
        self.service_id = service_id
        self.template_id = template_id
        self.public_key = public_key
        self.private_key = private_key
        self.timeout = timeout
        self.session = session or requests.Session()

    def send(self, template_params: dict[str, str]) -> None:
        """
        deliver one message

        args:
            template_params: values substituted into the emailjs template

        raises:
            UpstreamError: emailjs rejected the message or could not be reached
        """
        payload = {
            "service_id": self.service_id,
            "template_id": self.template_id,
            "user_id": self.public_key,
            "template_params": template_params,
        }
        if self.private_key:
            payload["accessToken"] = self.private_key

        with tracer.start_as_current_span("emailjs.send"):
            response = send_request(
                self.session, "POST", self.api_url, self.timeout, SERVICE, json=payload
            )

        if response.status_code != 200:
            message = response.text.strip()
            category = classify_upstream_error(status_code=response.status_code, message=message)
            logger.error(
                "emailjs rejected message",
                status_code=response.status_code,
                error=message[:200],
                category=category.value,
            )
            raise UpstreamError(
                f"emailjs error {response.status_code}: {message[:200]}",
                category,
                details={"status_code": response.status_code},
            )

        logger.info("contact message sent", template_id=self.template_id)

    def shutdown(self) -> None:
        """release the http session"""
        self.session.close()
