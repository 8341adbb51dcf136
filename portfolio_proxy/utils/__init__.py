"""image, payload and executor helpers"""

from .executor import run_in_executor
from .image_utils import (
    binarize_image,
    decode_base64_image,
    sniff_mime_type,
    to_data_url,
    validate_image_size,
)

__all__ = [
    "binarize_image",
    "decode_base64_image",
    "run_in_executor",
    "sniff_mime_type",
    "to_data_url",
    "validate_image_size",
]
