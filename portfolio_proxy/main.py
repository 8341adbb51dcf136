from contextlib import asynccontextmanager
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .api.routes import contact, health, recognition, sslgrade
from .config import settings
from .dependencies import RecognizerDependency, SSLLabsDependency, shutdown_all
from .exceptions import ConfigurationError
from .logger import configure_logging, get_logger
from .observability.telemetry import configure_telemetry, instrument_app

configure_logging()
logger = get_logger(__name__)

_STATUS_MESSAGES = {
    404: "Not found",
    405: "Method not allowed",
}


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """application lifecycle manager"""
    logger.info("starting portfolio proxy", provider=settings.recognition_provider)

    # startup
    configure_telemetry()
    SSLLabsDependency.get_instance()
    try:
        RecognizerDependency.get_instance()
    except ConfigurationError as e:
        # the service still serves the other proxies
        logger.error("recognizer not available", error=e.message, details=e.details)

    logger.info("service ready")

    yield

    # shutdown
    logger.info("shutting down service")
    shutdown_all()
    logger.info("service stopped")


app = FastAPI(
    title="Portfolio Proxy",
    description="proxies for handwriting recognition, ssl grading and contact mail",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials="*" not in settings.allowed_origins_list,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)

instrument_app(app)

app.include_router(health.router)
app.include_router(recognition.router)
app.include_router(sslgrade.router)
app.include_router(contact.router)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(_request: Request, exc: StarletteHTTPException):
    """render http errors as {error}"""
    message = str(exc.detail)
    # starlette's default detail is the bare status phrase
    if exc.status_code in _STATUS_MESSAGES and message == HTTPStatus(exc.status_code).phrase:
        message = _STATUS_MESSAGES[exc.status_code]
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": message},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """malformed bodies and parameters are client errors, not 422"""
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        problems.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))

    logger.warning("request validation failed", path=request.url.path, errors=problems)
    return JSONResponse(
        status_code=400,
        content={"error": "; ".join(problems) or "Invalid request"},
    )


@app.exception_handler(ConfigurationError)
async def configuration_exception_handler(request: Request, exc: ConfigurationError):
    logger.error(
        "service not configured", path=request.url.path, error=exc.message, details=exc.details
    )
    return JSONResponse(status_code=503, content={"error": "Service is not configured"})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    last resort for unhandled errors

    logs the error and returns a generic message, never internal details
    """
    logger.error(
        f"unhandled exception: {type(exc).__name__}",
        path=request.url.path,
        method=request.method,
        exc_info=True,
    )
    return JSONResponse(status_code=500, content={"error": "Internal server error"})
