import base64
import io

import numpy as np
import pytest
from PIL import Image

from portfolio_proxy.exceptions import InputValidationError
from portfolio_proxy.utils import (
    binarize_image,
    decode_base64_image,
    sniff_mime_type,
    to_data_url,
    validate_image_size,
)


def test_decode_plain_and_data_url(png_bytes, png_base64):
    assert decode_base64_image(png_base64) == png_bytes
    assert decode_base64_image(f"data:image/png;base64,{png_base64}") == png_bytes


def test_decode_ignores_line_wrapping(png_bytes, png_base64):
    wrapped = "\n".join(png_base64[i : i + 16] for i in range(0, len(png_base64), 16))

    assert decode_base64_image(wrapped) == png_bytes


@pytest.mark.parametrize("value", ["", "  ", "data:image/png;base64,"])
def test_decode_empty(value):
    with pytest.raises(InputValidationError, match="No image data provided"):
        decode_base64_image(value)


def test_decode_without_padding(png_bytes, png_base64):
    unpadded = png_base64.rstrip("=")

    assert decode_base64_image(unpadded) == png_bytes
    assert decode_base64_image(f"data:image/png;base64,{unpadded}") == png_bytes


def test_decode_truncated_quantum():
    with pytest.raises(InputValidationError, match="not valid base64"):
        decode_base64_image("abcde")


def test_decode_invalid():
    with pytest.raises(InputValidationError) as excinfo:
        decode_base64_image("abc$")

    assert excinfo.value.status_code == 400


def test_size_limit():
    validate_image_size(b"x" * 10, None)
    validate_image_size(b"x" * 10, 10)

    with pytest.raises(InputValidationError) as excinfo:
        validate_image_size(b"x" * 11, 10)

    assert excinfo.value.status_code == 413


@pytest.mark.parametrize(
    "data, mime_type",
    [
        (b"\x89PNG\r\n\x1a\n....", "image/png"),
        (b"\xff\xd8\xff\xe0....", "image/jpeg"),
        (b"GIF89a....", "image/gif"),
        (b"RIFF\x00\x00\x00\x00WEBPVP8 ", "image/webp"),
        (b"unknown", "image/png"),
    ],
)
def test_sniff_mime_type(data, mime_type):
    assert sniff_mime_type(data) == mime_type


def test_to_data_url(png_bytes):
    url = to_data_url(png_bytes)

    assert url.startswith("data:image/png;base64,")
    assert base64.b64decode(url.split(",", 1)[1]) == png_bytes


def test_binarize_threshold():
    image = Image.new("RGB", (3, 1))
    image.putpixel((0, 0), (199, 199, 199))
    image.putpixel((1, 0), (200, 200, 200))
    image.putpixel((2, 0), (255, 0, 0))
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")

    result = Image.open(io.BytesIO(binarize_image(buffer.getvalue(), threshold=200)))
    pixels = np.asarray(result)

    assert result.format == "PNG"
    assert pixels.tolist() == [[0, 255, 0]]


def test_binarize_rejects_garbage():
    with pytest.raises(InputValidationError, match="invalid image format"):
        binarize_image(b"not an image")
