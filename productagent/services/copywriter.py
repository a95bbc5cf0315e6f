"""
Copywriter agent: product title from a photo
"""
import logging
from typing import Optional

from productagent.config import settings
from productagent.services.gemini import (
    build_inline_part,
    build_url,
    extract_first_text,
    post_generate_content,
)

logger = logging.getLogger(__name__)


TITLE_PROMPT = (
    "Look at this product image carefully. Generate a single, high-converting, "
    "SEO-friendly e-commerce product title. It should be catchy, mention key features "
    "(color, material, type) if visible, and be under 100 characters. Do not include quotes."
)


class CopywriterAgent:
    """Generates a marketing title for a product photo"""

    name = "Copywriter"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None
    ):
        self.api_key = settings.GEMINI_API_KEY if api_key is None else api_key
        self.model = model or settings.COPY_MODEL
        self.base_url = base_url or settings.GEMINI_BASE_URL
        self.timeout = timeout or settings.COPY_TIMEOUT

    def build_payload(self, encoded_image: str, mime_type: str) -> dict:
        return {
            "contents": [{
                "role": "user",
                "parts": [
                    {"text": TITLE_PROMPT},
                    build_inline_part(encoded_image, mime_type)
                ]
            }]
        }

    async def generate_title(self, encoded_image: str, mime_type: str = "image/jpeg") -> str:
        """
        Ask the text model for a product title.

        Raises:
            AgentRequestFailed: endpoint returned non-success status
            AgentEmptyResult: no text at candidates[0].content.parts[0]
        """
        logger.info(f"Sending title request to {self.model}...")

        result = await post_generate_content(
            build_url(self.base_url, self.model, self.api_key),
            self.build_payload(encoded_image, mime_type),
            self.name,
            self.timeout
        )
        title = extract_first_text(result, self.name)

        logger.info(f"Title generated: {title[:100]}")
        return title
