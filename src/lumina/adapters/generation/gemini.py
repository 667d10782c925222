from __future__ import annotations

import base64
import logging

from google import genai
from google.genai import types

from .base import ImageGenerationError

LOGGER = logging.getLogger(__name__)

DEFAULT_GENERATION_MODEL = "gemini-2.5-flash-image"
DEFAULT_IMAGE_MIME_TYPE = "image/jpeg"


def to_data_url(data: bytes, mime_type: str) -> str:
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def first_inline_image(
    response: types.GenerateContentResponse,
    *,
    default_mime_type: str = DEFAULT_IMAGE_MIME_TYPE,
) -> str | None:
    candidates = response.candidates or []
    if not candidates or candidates[0].content is None:
        return None

    for part in candidates[0].content.parts or []:
        inline = part.inline_data
        if inline is None or not inline.data:
            continue
        return to_data_url(inline.data, inline.mime_type or default_mime_type)
    return None


class GeminiImageGenerator:
    def __init__(
        self,
        *,
        client: genai.Client,
        model: str = DEFAULT_GENERATION_MODEL,
        default_mime_type: str = DEFAULT_IMAGE_MIME_TYPE,
    ) -> None:
        self._client = client
        self._model = model
        self._default_mime_type = default_mime_type

    async def generate(self, prompt: str) -> str | None:
        """Send ``prompt`` as the only content and return the first inline image.

        Image models take no response_mime_type or response_schema, so the
        request carries no config. A response without an image part gives None.
        """
        try:
            response = await self._client.aio.models.generate_content(
                model=self._model,
                contents=prompt,
            )
        except Exception as exc:
            LOGGER.exception("Image generation with '%s' failed", self._model)
            raise ImageGenerationError(f"Image generation with '{self._model}' failed") from exc

        image_url = first_inline_image(response, default_mime_type=self._default_mime_type)
        if image_url is None:
            LOGGER.info("Image generation with '%s' returned no image part", self._model)
        return image_url
