from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace
from typing import Any, Sequence

import pytest
from google.genai import types

from lumina.domain.models import AnalysisResult, Photo
from lumina.storage import PhotoStoreError, SlotPhotoStore


class MemoryPhotoStore:
    def __init__(self, photos: list[Photo] | None = None, *, load_error: bool = False) -> None:
        self.saved: list[list[Photo]] = []
        self._photos = photos
        self._load_error = load_error
        self.fail_saves = False

    def load(self) -> list[Photo] | None:
        if self._load_error:
            raise PhotoStoreError("corrupt")
        return self._photos

    def save(self, photos: Sequence[Photo]) -> None:
        if self.fail_saves:
            raise PhotoStoreError("quota exceeded")
        self.saved.append(list(photos))


class FakeModels:
    def __init__(self, *, response: Any = None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def generate_content(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response


def fake_genai_client(models: FakeModels) -> Any:
    return SimpleNamespace(aio=SimpleNamespace(models=models))


def model_response(*parts: types.Part) -> types.GenerateContentResponse:
    return types.GenerateContentResponse(
        candidates=[types.Candidate(content=types.Content(role="model", parts=list(parts)))]
    )


class StubAnalyzer:
    def __init__(self, result: AnalysisResult | None = None, *, error: Exception | None = None) -> None:
        self.result = result or AnalysisResult(description="A cat on a wall.", tags=["cat", "outdoor"])
        self.error = error
        self.calls: list[tuple[bytes, str]] = []

    async def analyze(self, image_bytes: bytes, mime_type: str) -> AnalysisResult:
        self.calls.append((image_bytes, mime_type))
        if self.error is not None:
            raise self.error
        return self.result


class StubGenerator:
    def __init__(self, result: str | None = "data:image/png;base64,AAAA", *, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> str | None:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.result


def make_photo(photo_id: str, *, tags: list[str] | None = None, description: str | None = None, **kwargs: Any) -> Photo:
    return Photo(
        id=photo_id,
        url=kwargs.pop("url", f"https://example.com/{photo_id}.jpg"),
        tags=tags or [],
        description=description,
        created_at=kwargs.pop("created_at", 1_700_000_000_000),
        source=kwargs.pop("source", "upload"),
        **kwargs,
    )


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "lumina.db"


@pytest.fixture
def slot_store(db_path: Path) -> SlotPhotoStore:
    return SlotPhotoStore(db_path=db_path)


@pytest.fixture
def memory_store() -> MemoryPhotoStore:
    return MemoryPhotoStore()
