import base64
import binascii
from io import BytesIO
from typing import Optional

from PIL import Image, UnidentifiedImageError

# Media types accepted as inlineData by generateContent
SUPPORTED_MIME_TYPES = {"image/png", "image/jpeg", "image/webp", "image/heic", "image/heif"}

# Multi-picture camera JPEGs are a plain JPEG stream
FORMAT_MIME_OVERRIDES = {"MPO": "image/jpeg"}


def validate_image_file(file_size: int, max_size: int = 20 * 1024 * 1024) -> tuple[bool, Optional[str]]:
    """
    Validate image file

    Args:
        file_size: File size in bytes
        max_size: Maximum allowed file size (default 20MB)

    Returns:
        Tuple of (is_valid, error_message)
    """
    if file_size <= 0:
        return False, "No image file selected"

    if file_size > max_size:
        max_mb = max_size / (1024 * 1024)
        return False, f"File is too large. Maximum size: {max_mb:.0f}MB"

    return True, None


def detect_image_mime_type(image_bytes: bytes) -> Optional[str]:
    """
    Detect image media type from its contents.

    Returns:
        e.g. "image/png", or None if the bytes are not a recognised image
    """
    try:
        img = Image.open(BytesIO(image_bytes))
    except (UnidentifiedImageError, OSError):
        return None

    if not img.format:
        return None

    fmt = img.format.upper()
    if fmt in FORMAT_MIME_OVERRIDES:
        return FORMAT_MIME_OVERRIDES[fmt]
    return Image.MIME.get(fmt, f"image/{img.format.lower()}")


def is_supported_mime_type(mime_type: Optional[str]) -> bool:
    return mime_type in SUPPORTED_MIME_TYPES


def detect_encoded_image_mime_type(encoded_image: str) -> Optional[str]:
    """Media type of base64 image data, None if undecodable or unrecognised"""
    try:
        image_bytes = base64.b64decode(encoded_image, validate=True)
    except (binascii.Error, ValueError):
        return None
    return detect_image_mime_type(image_bytes)
