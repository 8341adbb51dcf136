"""
abstract base class for text recognition providers
"""

import re
from abc import ABC, abstractmethod

import requests

_NEWLINES = re.compile(r"\r\n|\r|\n")


def normalize_text(raw_text: str | None) -> str:
    """collapse every line break into a single space and trim"""
    if not raw_text:
        return ""
    return _NEWLINES.sub(" ", raw_text).strip()


class BaseRecognizer(ABC):
    """
    common interface for external text recognition services

    implementations are synchronous and get their credentials and http
    session through the constructor
    """

    name: str = "base"

    def __init__(self, timeout: float, session: requests.Session | None = None):
        self.timeout = timeout
        self.session = session or requests.Session()

    @abstractmethod
    def recognize(self, image_bytes: bytes) -> str:
        """
        recognize text in an image

        args:
            image_bytes: decoded image

        returns:
            raw recognized text, empty string when nothing was found

        raises:
            UpstreamError: the service failed or could not be reached
        """

    def shutdown(self) -> None:
        """release the http session"""
        self.session.close()
