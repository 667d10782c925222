"""In-memory photo collection with search and persist-on-change.

The manager owns the canonical, newest-first list of photos. Every mutation
replaces the list and then runs the post-mutation hooks: first ``persist``,
which writes the most recent ``persist_limit`` photos to the store, then any
listeners registered with ``add_listener``. A failed write never touches the
in-memory list, so the collection may hold more than what is durable.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Sequence

from ..domain.models import Photo
from ..domain.samples import sample_photos
from ..storage.photo_store import PhotoStore, PhotoStoreError

LOGGER = logging.getLogger(__name__)

DEFAULT_PERSIST_LIMIT = 20

Clock = Callable[[], int]
PhotoListener = Callable[[Sequence[Photo]], None]


def now_ms() -> int:
    return time.time_ns() // 1_000_000


def filter_photos(photos: list[Photo], text: str) -> list[Photo]:
    """Stable substring filter over tags and description.

    An empty ``text`` returns ``photos`` itself rather than a copy.
    """
    if not text:
        return photos
    needle = text.lower()
    return [photo for photo in photos if photo.matches(needle)]


class CollectionStateManager:
    def __init__(
        self,
        *,
        store: PhotoStore,
        persist_limit: int = DEFAULT_PERSIST_LIMIT,
        clock: Clock = now_ms,
    ) -> None:
        if persist_limit < 1:
            raise ValueError("persist_limit must be >= 1")
        self._store = store
        self._persist_limit = persist_limit
        self._clock = clock
        self._photos: list[Photo] = []
        self._search_query = ""
        self._initialized = False
        self._revision = 0
        self._listeners: list[PhotoListener] = []
        self._view_key: tuple[int, str] | None = None
        self._view: list[Photo] = []

    @property
    def photos(self) -> list[Photo]:
        return self._photos

    @property
    def search_query(self) -> str:
        return self._search_query

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def persist_limit(self) -> int:
        return self._persist_limit

    def initialize(self) -> list[Photo]:
        if self._initialized:
            LOGGER.debug("Photo collection already initialized, ignoring repeat call")
            return self._photos
        self._initialized = True

        try:
            persisted = self._store.load()
        except PhotoStoreError:
            LOGGER.exception("Failed to load persisted photos, using sample photos")
            persisted = None

        if persisted is None:
            photos = sample_photos(self._clock())
            LOGGER.info("Initialized photo collection with %d sample photos", len(photos))
        else:
            photos = persisted
            LOGGER.info("Initialized photo collection with %d persisted photos", len(photos))

        self._replace(photos)
        return self._photos

    def insert(self, photo: Photo) -> None:
        self._replace([photo, *self._photos])
        LOGGER.info(
            "Inserted %s photo '%s'; collection now holds %d photos",
            photo.source,
            photo.id,
            len(self._photos),
        )

    def get(self, photo_id: str) -> Photo | None:
        for photo in self._photos:
            if photo.id == photo_id:
                return photo
        return None

    def query(self, text: str) -> list[Photo]:
        return filter_photos(self._photos, text)

    def set_search_query(self, text: str) -> list[Photo]:
        self._search_query = text
        return self.visible_photos

    @property
    def visible_photos(self) -> list[Photo]:
        key = (self._revision, self._search_query)
        if self._view_key != key:
            self._view = self.query(self._search_query)
            self._view_key = key
        return self._view

    def add_listener(self, listener: PhotoListener) -> None:
        self._listeners.append(listener)

    def persist(self) -> bool:
        if not self._photos:
            return False

        snapshot = self._photos[: self._persist_limit]
        try:
            self._store.save(snapshot)
        except PhotoStoreError as exc:
            LOGGER.warning("Could not persist latest photo changes: %s", exc)
            return False
        return True

    def _replace(self, photos: list[Photo]) -> None:
        self._photos = photos
        self._revision += 1
        self._after_mutation()

    def _after_mutation(self) -> None:
        if not self._photos:
            return
        self.persist()
        for listener in self._listeners:
            try:
                listener(self._photos)
            except Exception:
                LOGGER.exception("Photo collection listener %r failed", listener)
