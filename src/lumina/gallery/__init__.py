from .state import CollectionStateManager, filter_photos, now_ms
from .workflows import (
    AnalysisFailedError,
    EmptyPromptError,
    NoImageGeneratedError,
    UploadRejectedError,
    WorkflowError,
    build_generation_prompt,
    generate_photo,
    upload_photo,
)

__all__ = [
    "AnalysisFailedError",
    "CollectionStateManager",
    "EmptyPromptError",
    "NoImageGeneratedError",
    "UploadRejectedError",
    "WorkflowError",
    "build_generation_prompt",
    "filter_photos",
    "generate_photo",
    "now_ms",
    "upload_photo",
]
