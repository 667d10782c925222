from __future__ import annotations

from typing import Protocol


class ImageGenerationError(RuntimeError):
    """Raised when the image generation request itself fails."""


class ImageGenerator(Protocol):
    async def generate(self, prompt: str) -> str | None:
        """Return a ``data:`` URL for the generated image, or None when no image came back."""
