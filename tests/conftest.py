import base64
import io
import json
from unittest.mock import Mock

import pytest
import requests
from fastapi.testclient import TestClient
from PIL import Image

from portfolio_proxy.dependencies import get_recognizer
from portfolio_proxy.main import app


class FakeRecognizer:
    """stands in for a recognition provider and records what it was sent"""

    name = "fake"

    def __init__(self, text: str = "", error: Exception | None = None):
        self.text = text
        self.error = error
        self.calls: list[bytes] = []

    def recognize(self, image_bytes: bytes) -> str:
        self.calls.append(image_bytes)
        if self.error is not None:
            raise self.error
        return self.text

    def shutdown(self) -> None:
        pass


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_response():
    def _make(status_code: int = 200, json_body=None, text: str | None = None):
        response = requests.Response()
        response.status_code = status_code
        if json_body is not None:
            response._content = json.dumps(json_body).encode("utf-8")
            response.headers["Content-Type"] = "application/json"
        else:
            response._content = (text or "").encode("utf-8")
        response.encoding = "utf-8"
        return response

    return _make


@pytest.fixture
def session():
    return Mock(spec=requests.Session)


@pytest.fixture
def png_bytes():
    image = Image.new("RGB", (4, 4), (255, 255, 255))
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def png_base64(png_bytes):
    return base64.b64encode(png_bytes).decode("ascii")


@pytest.fixture
def install_recognizer(client):
    """replace the recognition provider with a FakeRecognizer"""

    def _install(text: str = "", error: Exception | None = None) -> FakeRecognizer:
        fake = FakeRecognizer(text=text, error=error)
        app.dependency_overrides[get_recognizer] = lambda: lambda: (fake, None)
        return fake

    return _install
