"""
ai/openai_images.py
-------------------
Uses the OpenAI Images API to generate new images from a prompt and to
edit an uploaded photo according to a caption.

Responsibilities:
    - Issue exactly one generate/edit request per call (no retries).
    - Normalise the response into a GeneratedImage: inline base64 for
      gpt-image-1, a URL for dall-e-3.
"""

import base64
from dataclasses import dataclass
from typing import Optional

from openai import AsyncOpenAI

from config import IMAGE_SIZE
from utils.errors import RemoteAPIError
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class GeneratedImage:
    """
    First image of a generation response.

    Attributes:
        b64_json: Inline base64-encoded image bytes, if returned.
        url: Remote URL of the image, if returned.
    """
    b64_json: Optional[str] = None
    url: Optional[str] = None

    def decode(self) -> bytes:
        """Decode the inline payload. Raises RemoteAPIError if it is malformed."""
        try:
            return base64.b64decode(self.b64_json or "", validate=True)
        except ValueError as e:
            raise RemoteAPIError(f"Malformed image data received from OpenAI: {e}") from e


@dataclass(frozen=True)
class PreparedImage:
    """An image ready for upload as a multipart file."""
    filename: str
    content: bytes
    mime_type: str = "image/jpeg"


def _first_image(response) -> GeneratedImage:
    data = getattr(response, "data", None) or []
    if not data:
        raise RemoteAPIError("No image data received from OpenAI")
    item = data[0]
    return GeneratedImage(
        b64_json=getattr(item, "b64_json", None),
        url=getattr(item, "url", None),
    )


class ImageGenerator:
    """Async client for the two Images API operations the bot uses."""

    def __init__(self, api_key: str, client: Optional[AsyncOpenAI] = None):
        self.client = client or AsyncOpenAI(api_key=api_key, max_retries=0)

    async def generate(self, model: str, prompt: str, n: int = 1,
                       size: str = IMAGE_SIZE) -> GeneratedImage:
        """
        Create an image from a text prompt.

        Args:
            model: e.g. "gpt-image-1" or "dall-e-3".
            prompt: Free-form description.
            n: Number of images to request.
            size: Output resolution.

        Returns:
            The first returned image.

        Raises:
            RemoteAPIError: If the response carries no image.
        """
        logger.info(f"Generating image with {model}: {prompt!r}")
        response = await self.client.images.generate(
            model=model, prompt=prompt, n=n, size=size
        )
        return _first_image(response)

    async def edit(self, image: PreparedImage, model: str, prompt: str,
                   n: int = 1) -> GeneratedImage:
        """
        Edit an uploaded image following ``prompt``.

        Raises:
            RemoteAPIError: If the response carries no image.
        """
        logger.info(
            f"Editing {image.filename} ({len(image.content)} bytes) with {model}: {prompt!r}"
        )
        response = await self.client.images.edit(
            image=(image.filename, image.content, image.mime_type),
            model=model,
            prompt=prompt,
            n=n,
        )
        return _first_image(response)
