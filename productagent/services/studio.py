"""
Studio agent: re-stages a product photo as a professional shot
"""
import logging
from typing import Optional

from productagent.config import settings
from productagent.services.gemini import (
    build_inline_part,
    build_url,
    extract_inline_image,
    post_generate_content,
)

logger = logging.getLogger(__name__)


STUDIO_PROMPT = (
    "Turn this into a professional e-commerce product shot. Keep the product exactly as it is, "
    "but improve the lighting to be soft studio lighting, remove clutter, and place it on a clean, "
    "neutral, high-end background. High resolution, photorealistic."
)


class StudioAgent:
    """Service for rendering studio product shots via the image model"""

    name = "Studio"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None
    ):
        self.api_key = settings.GEMINI_API_KEY if api_key is None else api_key
        self.model = model or settings.STUDIO_MODEL
        self.base_url = base_url or settings.GEMINI_BASE_URL
        self.timeout = timeout or settings.STUDIO_TIMEOUT

    def build_payload(self, encoded_image: str, mime_type: str) -> dict:
        return {
            "contents": [{
                "parts": [
                    {"text": STUDIO_PROMPT},
                    build_inline_part(encoded_image, mime_type)
                ]
            }],
            "generationConfig": {
                "responseModalities": ["IMAGE"]
            }
        }

    async def render(self, encoded_image: str, mime_type: str = "image/jpeg") -> str:
        """
        Generate the studio version of a product photo.

        Args:
            encoded_image: Base64 of the original upload
            mime_type: Media type of the original upload

        Returns:
            Base64 image data, without a data URL prefix

        Raises:
            AgentRequestFailed: endpoint returned non-success status
            AgentEmptyResult: no inline image part in the response
        """
        logger.info(f"Sending studio render request to {self.model}...")

        result = await post_generate_content(
            build_url(self.base_url, self.model, self.api_key),
            self.build_payload(encoded_image, mime_type),
            self.name,
            self.timeout,
            failure_action="failed to render"
        )
        image_data = extract_inline_image(result, self.name)

        logger.info(f"Studio image received ({len(image_data)} base64 chars)")
        return image_data
