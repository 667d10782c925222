from .base import ImageAnalysisError, ImageAnalyzer
from .gemini import GeminiImageAnalyzer, fallback_analysis

__all__ = ["GeminiImageAnalyzer", "ImageAnalysisError", "ImageAnalyzer", "fallback_analysis"]
