from __future__ import annotations

import logging
from typing import Sequence

from ..adapters.analysis import ImageAnalyzer
from ..adapters.generation import ImageGenerator, to_data_url
from ..domain.models import Photo
from .state import Clock, CollectionStateManager, now_ms

LOGGER = logging.getLogger(__name__)

GENERATED_TAGS = ("generated", "ai")
PROMPT_TAG_COUNT = 3
DEFAULT_SUBJECT_KEYWORDS = ("portrait", "girl", "woman")
DEFAULT_PROMPT_TEMPLATE = (
    "Portrait of a girl, {prompt}, cinematic lighting, 8k resolution, "
    "photorealistic, highly detailed, beautiful depth of field"
)


class WorkflowError(RuntimeError):
    """Base class for upload/generate failures that should be shown to the user."""


class UploadRejectedError(WorkflowError):
    """Raised when an upload is not an image."""


class AnalysisFailedError(WorkflowError):
    """Raised when image analysis raised instead of degrading to its fallback."""


class EmptyPromptError(WorkflowError):
    """Raised when a generation prompt is blank."""


class NoImageGeneratedError(WorkflowError):
    """Raised when the generator answered but returned no image."""


def generated_tags(prompt: str) -> list[str]:
    return [*GENERATED_TAGS, *prompt.split()[:PROMPT_TAG_COUNT]]


def build_generation_prompt(
    prompt: str,
    *,
    subject_keywords: Sequence[str] = DEFAULT_SUBJECT_KEYWORDS,
    template: str = DEFAULT_PROMPT_TEMPLATE,
) -> str:
    """Wrap prompts that name no subject keyword in ``template``.

    Matching is a case-insensitive substring test, so "portraits" counts.
    """
    lowered = prompt.lower()
    if any(keyword.lower() in lowered for keyword in subject_keywords):
        return prompt
    return template.format(prompt=prompt)


async def upload_photo(
    manager: CollectionStateManager,
    analyzer: ImageAnalyzer,
    image_bytes: bytes,
    mime_type: str,
    *,
    clock: Clock = now_ms,
) -> Photo:
    media_type = mime_type.split(";", 1)[0].strip().lower()
    if not media_type.startswith("image/"):
        raise UploadRejectedError(f"Only image uploads are supported, got '{mime_type or 'unknown'}'")
    if not image_bytes:
        raise UploadRejectedError("Uploaded image was empty")

    preview_url = to_data_url(image_bytes, media_type)
    try:
        analysis = await analyzer.analyze(image_bytes, media_type)
    except Exception as exc:
        LOGGER.exception("Upload analysis raised, nothing was added")
        raise AnalysisFailedError("Failed to analyze image. Please check your API key.") from exc

    created_at = clock()
    photo = Photo(
        id=str(created_at),
        url=preview_url,
        source="upload",
        tags=analysis.tags,
        description=analysis.description,
        created_at=created_at,
    )
    manager.insert(photo)
    return photo


async def generate_photo(
    manager: CollectionStateManager,
    generator: ImageGenerator,
    prompt: str,
    *,
    subject_keywords: Sequence[str] = DEFAULT_SUBJECT_KEYWORDS,
    prompt_template: str = DEFAULT_PROMPT_TEMPLATE,
    clock: Clock = now_ms,
) -> Photo:
    """Generate an image from ``prompt`` and add it to the collection.

    The generator receives ``build_generation_prompt(prompt)``; the photo's
    description and tags are built from the prompt as the user typed it.

    ``ImageGenerationError`` from the generator propagates unchanged; a
    generator that answers without an image raises ``NoImageGeneratedError``.
    Nothing is inserted in either case.
    """
    text = prompt.strip()
    if not text:
        raise EmptyPromptError("Prompt must not be empty")

    final_prompt = build_generation_prompt(text, subject_keywords=subject_keywords, template=prompt_template)
    image_url = await generator.generate(final_prompt)
    if image_url is None:
        raise NoImageGeneratedError("No image was generated. Try a different prompt.")

    created_at = clock()
    photo = Photo(
        id=str(created_at),
        url=image_url,
        source="generated",
        tags=generated_tags(text),
        description=f"AI Generated: {text}",
        created_at=created_at,
    )
    manager.insert(photo)
    return photo
