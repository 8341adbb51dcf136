import base64

import pytest

from portfolio_proxy.config import Settings
from portfolio_proxy.exceptions import ConfigurationError, UpstreamError, UpstreamErrorCategory
from portfolio_proxy.services import GoogleVisionRecognizer, build_recognizer

API_URL = "https://vision.googleapis.test/v1/images:annotate"


@pytest.fixture
def recognizer(session):
    return GoogleVisionRecognizer(api_key="vkey", api_url=API_URL, timeout=5.0, session=session)


def test_document_text_detection_request(recognizer, session, make_response, png_bytes):
    session.request.return_value = make_response(
        200, {"responses": [{"fullTextAnnotation": {"text": "HELLO\nWORLD\n"}}]}
    )

    assert recognizer.recognize(png_bytes) == "HELLO\nWORLD\n"

    kwargs = session.request.call_args.kwargs
    assert kwargs["params"] == {"key": "vkey"}
    request = kwargs["json"]["requests"][0]
    assert request["features"] == [{"type": "DOCUMENT_TEXT_DETECTION"}]
    assert base64.b64decode(request["image"]["content"]) == png_bytes


def test_no_annotation_means_no_text(recognizer, session, make_response, png_bytes):
    session.request.return_value = make_response(200, {"responses": [{}]})

    assert recognizer.recognize(png_bytes) == ""


def test_rejected_key(recognizer, session, make_response, png_bytes):
    session.request.return_value = make_response(
        403,
        {"error": {"code": 403, "message": "Requests are blocked.", "status": "PERMISSION_DENIED"}},
    )

    with pytest.raises(UpstreamError) as excinfo:
        recognizer.recognize(png_bytes)

    assert excinfo.value.category is UpstreamErrorCategory.INVALID_KEY


def test_per_image_quota_error(recognizer, session, make_response, png_bytes):
    session.request.return_value = make_response(
        200, {"responses": [{"error": {"code": 8, "message": "Resource exhausted"}}]}
    )

    with pytest.raises(UpstreamError) as excinfo:
        recognizer.recognize(png_bytes)

    assert excinfo.value.category is UpstreamErrorCategory.QUOTA_EXCEEDED


def test_missing_key_is_configuration_error():
    with pytest.raises(ConfigurationError):
        GoogleVisionRecognizer(api_key="", api_url=API_URL)


def test_build_vision_provider():
    settings = Settings(_env_file=None, recognition_provider="vision", google_vision_api_key="abc")

    assert isinstance(build_recognizer(settings), GoogleVisionRecognizer)


def test_unknown_provider():
    with pytest.raises(ConfigurationError):
        build_recognizer(Settings(_env_file=None, recognition_provider="tesseract"))
