import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import Annotated

from fastapi import Depends

from .config import settings
from .logger import get_logger

logger = get_logger(__name__)


class ExecutorDependency:
    """thread pool shared by all blocking upstream calls"""

    _executor: ThreadPoolExecutor | None = None
    _lock = threading.Lock()

    @classmethod
    def get_instance(cls) -> ThreadPoolExecutor:
        with cls._lock:
            if cls._executor is None:
                cls._executor = ThreadPoolExecutor(
                    max_workers=settings.workers, thread_name_prefix="upstream"
                )
                logger.info("thread pool created", workers=settings.workers)
            return cls._executor

    @classmethod
    def shutdown(cls):
        with cls._lock:
            if cls._executor:
                logger.info("shutting down thread pool")
                cls._executor.shutdown(wait=True)
                cls._executor = None


class RecognizerDependency:
    """singleton for the text recognition provider"""

    _service = None
    _lock = threading.Lock()

    @classmethod
    def get_instance(cls):
        """get or create service instance"""
        with cls._lock:
            if cls._service is None:
                from .services import build_recognizer

                logger.info("creating recognizer", provider=settings.recognition_provider)
                cls._service = build_recognizer(settings)
                logger.info("recognizer created", provider=cls._service.name)
            service = cls._service

        return service, ExecutorDependency.get_instance()

    @classmethod
    def shutdown(cls):
        """cleanup"""
        with cls._lock:
            if cls._service:
                logger.info("shutting down recognizer")
                cls._service.shutdown()
                cls._service = None


class SSLLabsDependency:
    """singleton for the ssl labs client"""

    _client = None
    _lock = threading.Lock()

    @classmethod
    def get_instance(cls):
        with cls._lock:
            if cls._client is None:
                from .services import SSLLabsClient

                cls._client = SSLLabsClient(
                    api_url=settings.ssl_labs_api_url, timeout=settings.upstream_timeout
                )
                logger.info("ssl labs client created", api_url=settings.ssl_labs_api_url)
            client = cls._client

        return client, ExecutorDependency.get_instance()

    @classmethod
    def shutdown(cls):
        with cls._lock:
            if cls._client:
                cls._client.shutdown()
                cls._client = None


class EmailJSDependency:
    """singleton for the emailjs client, created on first contact request"""

    _client = None
    _lock = threading.Lock()

    @classmethod
    def get_instance(cls):
        with cls._lock:
            if cls._client is None:
                from .services import EmailJSClient

                cls._client = EmailJSClient(
                    api_url=settings.emailjs_api_url,
                    service_id=settings.emailjs_service_id,
                    template_id=settings.emailjs_template_id,
                    public_key=settings.emailjs_public_key,
                    private_key=settings.emailjs_private_key,
                    timeout=settings.upstream_timeout,
                )
                logger.info("emailjs client created")
            client = cls._client

        return client, ExecutorDependency.get_instance()

    @classmethod
    def shutdown(cls):
        with cls._lock:
            if cls._client:
                cls._client.shutdown()
                cls._client = None


def shutdown_all():
    """release every client and the thread pool"""
    RecognizerDependency.shutdown()
    SSLLabsDependency.shutdown()
    EmailJSDependency.shutdown()
    ExecutorDependency.shutdown()


def get_recognizer():
    """
    dependency injection for fastapi endpoints

    returns a loader instead of the instance so the endpoint can reject bad
    input before a misconfigured provider is built
    """
    return RecognizerDependency.get_instance


def get_ssl_labs_client():
    """dependency injection for fastapi endpoints"""
    return SSLLabsDependency.get_instance()


def get_emailjs_client():
    """dependency injection for fastapi endpoints, loaded lazily like the recognizer"""
    return EmailJSDependency.get_instance


ClientLoader = Callable[[], tuple]

RecognizerDep = Annotated[ClientLoader, Depends(get_recognizer)]
SSLLabsDep = Annotated[tuple, Depends(get_ssl_labs_client)]
EmailJSDep = Annotated[ClientLoader, Depends(get_emailjs_client)]
