from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from typing import Protocol, Sequence

from pydantic import ValidationError

from ..domain.models import PHOTO_LIST_ADAPTER, Photo
from .slots import StorageQuotaExceededError, get_slot, set_slot

LOGGER = logging.getLogger(__name__)


class PhotoStoreError(RuntimeError):
    """Raised when the persisted photo list cannot be read or written."""


class PhotoStore(Protocol):
    def load(self) -> list[Photo] | None:
        """Return the persisted photos, or None when nothing was ever saved."""

    def save(self, photos: Sequence[Photo]) -> None:
        """Replace the persisted photos with ``photos``."""


def serialize_photos(photos: Sequence[Photo]) -> str:
    return json.dumps([photo.to_record() for photo in photos], ensure_ascii=True, separators=(",", ":"))


def deserialize_photos(blob: str) -> list[Photo]:
    try:
        return PHOTO_LIST_ADAPTER.validate_json(blob)
    except ValidationError as exc:
        raise PhotoStoreError("Persisted photo list is not a valid JSON array of photos") from exc


class SlotPhotoStore:
    def __init__(self, *, db_path: Path, slot: str = "lumina_photos", max_bytes: int | None = None) -> None:
        self._db_path = Path(db_path)
        self._slot = slot
        self._max_bytes = max_bytes

    @property
    def slot(self) -> str:
        return self._slot

    def load(self) -> list[Photo] | None:
        try:
            blob = get_slot(self._db_path, self._slot)
        except sqlite3.Error as exc:
            raise PhotoStoreError(f"Unable to read photo slot '{self._slot}'") from exc
        if blob is None:
            return None
        return deserialize_photos(blob)

    def save(self, photos: Sequence[Photo]) -> None:
        blob = serialize_photos(photos)
        try:
            set_slot(self._db_path, self._slot, blob, max_bytes=self._max_bytes)
        except StorageQuotaExceededError as exc:
            raise PhotoStoreError(f"Storage quota exceeded while saving {len(photos)} photos") from exc
        except sqlite3.Error as exc:
            raise PhotoStoreError(f"Unable to write photo slot '{self._slot}'") from exc
        LOGGER.debug("Saved %d photos to slot '%s' (%d bytes)", len(photos), self._slot, len(blob))
