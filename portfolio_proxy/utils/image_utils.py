"""
helpers for base64 payloads and canvas images
"""

import base64
import binascii
import io

import numpy as np
from PIL import Image, UnidentifiedImageError

from ..exceptions import InputValidationError

_SIGNATURES: tuple[tuple[bytes, str], ...] = (
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"BM", "image/bmp"),
)


def decode_base64_image(base64_string: str) -> bytes:
    """
    decode a base64 image payload

    args:
        base64_string: raw base64 or a data url (data:image/png;base64,...)

    returns:
        decoded image bytes

    raises:
        InputValidationError: payload is empty or not valid base64
    """
    if "base64," in base64_string:
        base64_string = base64_string.split("base64,", 1)[1]

    # browsers may wrap long payloads
    cleaned = "".join(base64_string.split())
    if not cleaned:
        raise InputValidationError("No image data provided")

    # padding is optional for clients, b64decode requires it
    cleaned += "=" * (-len(cleaned) % 4)

    try:
        image_bytes = base64.b64decode(cleaned, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InputValidationError(
            "Image data is not valid base64", details={"error": str(e)}
        ) from e

    if not image_bytes:
        raise InputValidationError("Decoded image is empty")

    return image_bytes


def validate_image_size(image_bytes: bytes, max_size: int | None) -> None:
    """raise a 413 validation error when a size limit is set and exceeded"""
    if max_size is None:
        return

    size = len(image_bytes)
    if size > max_size:
        raise InputValidationError(
            f"image too large: {size} bytes (max {max_size})",
            details={"size": size, "max_size": max_size},
            status_code=413,
        )


def sniff_mime_type(image_bytes: bytes) -> str:
    """guess the mime type from the file signature, png if unknown"""
    for signature, mime_type in _SIGNATURES:
        if image_bytes.startswith(signature):
            return mime_type
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/png"


def to_data_url(image_bytes: bytes) -> str:
    """wrap image bytes into a base64 data url"""
    encoded = base64.b64encode(image_bytes).decode("ascii")
    return f"data:{sniff_mime_type(image_bytes)};base64,{encoded}"


def binarize_image(image_bytes: bytes, threshold: int = 200) -> bytes:
    """
    convert a drawing to pure black and white

    transparent areas are flattened onto white, then every pixel whose
    average rgb value is below the threshold becomes black and the rest white

    args:
        image_bytes: encoded image (png, jpeg, ...)
        threshold: grey level separating ink from background

    returns:
        png encoded black and white image

    raises:
        InputValidationError: bytes are not a decodable image
    """
    try:
        with Image.open(io.BytesIO(image_bytes)) as img:
            img.load()
            rgba = img.convert("RGBA")
    except (UnidentifiedImageError, OSError) as e:
        raise InputValidationError(
            f"invalid image format: {e}", details={"error": str(e)}
        ) from e

    background = Image.new("RGBA", rgba.size, (255, 255, 255, 255))
    flattened = Image.alpha_composite(background, rgba).convert("RGB")

    pixels = np.asarray(flattened, dtype=np.float32)
    average = pixels.mean(axis=2)
    mono = np.where(average < threshold, 0, 255).astype(np.uint8)

    output = io.BytesIO()
    Image.fromarray(mono).save(output, format="PNG")
    return output.getvalue()
