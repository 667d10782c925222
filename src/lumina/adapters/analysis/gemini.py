from __future__ import annotations

import logging

from google import genai
from google.genai import types
from pydantic import ValidationError

from ...domain.models import AnalysisResult
from .base import ImageAnalysisError

LOGGER = logging.getLogger(__name__)

DEFAULT_ANALYSIS_MODEL = "gemini-2.5-flash"
DEFAULT_ANALYSIS_INSTRUCTION = (
    "Analyze this image. Return a JSON object with two fields: 'description' "
    "(a concise, aesthetic 1-2 sentence caption describing the subject, lighting, "
    "and mood) and 'tags' (an array of 5-7 relevant single-word keywords)."
)
FALLBACK_DESCRIPTION = "A beautiful image."
FALLBACK_TAGS = ("portrait", "photography")


def fallback_analysis() -> AnalysisResult:
    return AnalysisResult(description=FALLBACK_DESCRIPTION, tags=list(FALLBACK_TAGS))


def _parse_analysis(text: str | None) -> AnalysisResult:
    if not text:
        raise ImageAnalysisError("Vision model returned no response text")
    try:
        return AnalysisResult.model_validate_json(text)
    except ValidationError as exc:
        raise ImageAnalysisError("Vision model response did not match the analysis schema") from exc


class GeminiImageAnalyzer:
    def __init__(
        self,
        *,
        client: genai.Client,
        model: str = DEFAULT_ANALYSIS_MODEL,
        instruction: str = DEFAULT_ANALYSIS_INSTRUCTION,
    ) -> None:
        self._client = client
        self._model = model
        self._instruction = instruction

    async def analyze(self, image_bytes: bytes, mime_type: str) -> AnalysisResult:
        """Caption and tag an image in one request.

        Any failure, from transport to a response that does not match
        ``AnalysisResult``, is logged and answered with ``fallback_analysis()``.
        """
        try:
            response = await self._client.aio.models.generate_content(
                model=self._model,
                contents=[
                    types.Part.from_bytes(data=image_bytes, mime_type=mime_type),
                    self._instruction,
                ],
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=AnalysisResult,
                ),
            )
            result = _parse_analysis(response.text)
        except Exception:
            LOGGER.exception("Image analysis with '%s' failed, using fallback result", self._model)
            return fallback_analysis()

        LOGGER.info("Analyzed %s image: %d tags", mime_type, len(result.tags))
        return result
