"""
Input Validation

Checks applied to photos before they reach the detector.
"""

from io import BytesIO
from pathlib import Path
from typing import Optional, Tuple, Union

from PIL import Image, UnidentifiedImageError

from ..domain.value_objects.image_data import ImageData


ACCEPTED_FORMATS = {"jpeg", "png", "bmp", "webp"}
ACCEPTED_SUFFIXES = {".jpg", ".jpeg", ".png", ".bmp", ".webp"}

# Phone cameras top out well below these.
MAX_PIXELS_PER_SIDE = 8192
MAX_PAYLOAD_BYTES = 20 * 1024 * 1024

ValidationOutcome = Tuple[bool, Optional[str]]


def _probe(data: bytes) -> Tuple[str, int, int]:
    """Read (format, width, height) from the image header only."""
    with Image.open(BytesIO(data)) as img:
        return (img.format or "").lower(), img.width, img.height


def validate_image(image: ImageData) -> ValidationOutcome:
    """
    Check that an encoded photo can be decoded and is a sensible size.

    Returns:
        (True, None) when valid, otherwise (False, reason)
    """
    if image.size > MAX_PAYLOAD_BYTES:
        return False, f"Image is {image.size} bytes, limit is {MAX_PAYLOAD_BYTES}"

    try:
        fmt, width, height = _probe(image.data)
    except (UnidentifiedImageError, OSError) as e:
        return False, f"Invalid image data: {e}"

    if fmt not in ACCEPTED_FORMATS:
        return False, f"Unsupported image format: {fmt or 'unknown'}"
    if max(width, height) > MAX_PIXELS_PER_SIDE:
        return False, f"Image is {width}x{height}, limit is {MAX_PIXELS_PER_SIDE} per side"

    return True, None


def validate_image_file(file_path: Union[str, Path]) -> ValidationOutcome:
    """Cheap checks on a photo path before it is read."""
    path = Path(file_path)

    if not path.is_file():
        return False, f"Not an image file: {file_path}"
    if path.suffix.lower() not in ACCEPTED_SUFFIXES:
        return False, f"Unsupported file extension: {path.suffix or '(none)'}"

    size = path.stat().st_size
    if size > MAX_PAYLOAD_BYTES:
        return False, f"File is {size} bytes, limit is {MAX_PAYLOAD_BYTES}"

    return True, None
