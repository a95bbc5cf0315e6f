"""
Image Loader

Turns an uploaded file into the payload both agents consume.
"""
import base64
import logging
import uuid
from dataclasses import dataclass, field
from typing import Optional

from productagent.config import settings
from productagent.services.errors import UnsupportedInput
from productagent.utils.validators import detect_image_mime_type, is_supported_mime_type, validate_image_file

logger = logging.getLogger(__name__)


@dataclass
class UploadedImage:
    """A selected product photo. Replaced entirely on every new selection."""

    payload: bytes
    encoded_payload: str
    mime_type: str
    filename: Optional[str] = None
    preview_handle: str = field(default_factory=lambda: uuid.uuid4().hex)


def load_image(
    data: Optional[bytes],
    filename: Optional[str] = None,
    content_type: Optional[str] = None,
    max_size: Optional[int] = None
) -> UploadedImage:
    """
    Validate uploaded bytes and encode them for a JSON request body.

    Args:
        data: Raw file contents (None when no file was selected)
        filename: Original file name, kept for display only
        content_type: Media type claimed by the client, for logging only
        max_size: Upload size limit, defaults to settings.MAX_UPLOAD_SIZE

    Returns:
        UploadedImage with a fresh preview handle

    Raises:
        UnsupportedInput: no file, file too large, not an image, or a format the agents cannot take
    """
    if data is None:
        raise UnsupportedInput("No image file selected")

    is_valid, error = validate_image_file(len(data), max_size or settings.MAX_UPLOAD_SIZE)
    if not is_valid:
        raise UnsupportedInput(error)

    mime_type = detect_image_mime_type(data)
    if mime_type is None:
        logger.warning(f"Rejected upload {filename!r}: not a recognised image ({content_type})")
        raise UnsupportedInput("Selected file is not a supported image")
    if not is_supported_mime_type(mime_type):
        logger.warning(f"Rejected upload {filename!r}: unsupported format {mime_type}")
        raise UnsupportedInput(f"Unsupported image format {mime_type}, use JPG, PNG or WEBP")

    encoded = base64.b64encode(data).decode('utf-8')
    image = UploadedImage(
        payload=data,
        encoded_payload=encoded,
        mime_type=mime_type,
        filename=filename
    )

    logger.info(f"Loaded image {filename!r} ({len(data)} bytes, {image.mime_type})")
    return image
