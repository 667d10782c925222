from __future__ import annotations

from typing import Protocol

from ...domain.models import AnalysisResult


class ImageAnalysisError(RuntimeError):
    """Raised when a vision model response cannot be turned into an analysis."""


class ImageAnalyzer(Protocol):
    async def analyze(self, image_bytes: bytes, mime_type: str) -> AnalysisResult:
        """Describe and tag an image. Never raises; degrades to a fallback result."""
