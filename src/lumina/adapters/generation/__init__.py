from .base import ImageGenerationError, ImageGenerator
from .gemini import GeminiImageGenerator, first_inline_image, to_data_url

__all__ = [
    "GeminiImageGenerator",
    "ImageGenerationError",
    "ImageGenerator",
    "first_inline_image",
    "to_data_url",
]
