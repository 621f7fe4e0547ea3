"""Logo image generation via the Gemini image preview model."""

import logging
from typing import Optional

from logomotion.config import (
    DEFAULT_IMAGE_MIME_TYPE,
    IMAGE_REQUEST_TIMEOUT,
    LOGO_ASPECT_RATIO,
    LOGO_IMAGE_MODEL,
)
from logomotion.errors import NoImageData
from logomotion.gemini_client import GeminiClient
from logomotion.models import GeneratedImage, ImageSize

logger = logging.getLogger(__name__)


def extract_inline_image(response: dict) -> Optional[dict]:
    """Return the first inline image part of a generateContent response.

    Parts are scanned in order and the first one carrying non-empty inline
    data wins; text parts and empty inline parts are skipped. Both the REST
    spelling (``inlineData``) and the snake_case one are accepted.
    """
    candidates = response.get("candidates") if isinstance(response, dict) else None
    if not candidates or not isinstance(candidates[0], dict):
        return None

    content = candidates[0].get("content")
    parts = content.get("parts") if isinstance(content, dict) else None
    for part in parts or []:
        if not isinstance(part, dict):
            continue
        inline = part.get("inlineData") or part.get("inline_data")
        if isinstance(inline, dict) and inline.get("data"):
            return inline
    return None


class LogoImageGenerator(GeminiClient):
    """Generates square logo images from a text description."""

    def __init__(self, *args, model: Optional[str] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.model = model or LOGO_IMAGE_MODEL

    def build_payload(self, prompt: str, image_size: ImageSize) -> dict:
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "responseModalities": ["TEXT", "IMAGE"],
                "imageConfig": {
                    "aspectRatio": LOGO_ASPECT_RATIO,
                    "imageSize": ImageSize.parse(image_size).value,
                },
            },
        }

    async def generate_logo(
        self,
        prompt: str,
        image_size: ImageSize = ImageSize.LOW,
    ) -> GeneratedImage:
        """Generate one logo image.

        Args:
            prompt: Logo description. Callers reject blank prompts before calling.
            image_size: Resolution tier for the output.

        Returns:
            GeneratedImage with the base64 payload and its content type.

        Raises:
            NoImageData: The response had no part with inline image data.
            RemoteCallFailure: The request itself failed.
            CredentialMissing: No API key is configured.
        """
        size = ImageSize.parse(image_size)
        logger.info(f"Generating logo ({size.value}) with {self.model}")

        data = await self._request_json(
            "POST",
            f"models/{self.model}:generateContent",
            payload=self.build_payload(prompt, size),
            timeout=IMAGE_REQUEST_TIMEOUT,
        )

        inline = extract_inline_image(data)
        if not inline:
            logger.error("No image data received from the model")
            raise NoImageData("No image data received from the model.")

        mime_type = inline.get("mimeType") or inline.get("mime_type") or DEFAULT_IMAGE_MIME_TYPE
        logger.info(f"Logo ready ({mime_type}, {len(inline['data'])} base64 chars)")
        return GeneratedImage(base64=inline["data"], mime_type=mime_type)
