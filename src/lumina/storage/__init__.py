from .photo_store import (
    PhotoStore,
    PhotoStoreError,
    SlotPhotoStore,
    deserialize_photos,
    serialize_photos,
)
from .slots import StorageQuotaExceededError, get_slot, initialize_slots, set_slot

__all__ = [
    "PhotoStore",
    "PhotoStoreError",
    "SlotPhotoStore",
    "StorageQuotaExceededError",
    "deserialize_photos",
    "get_slot",
    "initialize_slots",
    "serialize_photos",
    "set_slot",
]
