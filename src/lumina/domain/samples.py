from __future__ import annotations

from .models import Photo

_SAMPLE_RECORDS = (
    (
        "1",
        "https://picsum.photos/id/64/800/1200",
        "A portrait of a girl with windblown hair in soft natural light.",
        ["portrait", "natural", "girl", "wind", "soft"],
    ),
    (
        "2",
        "https://picsum.photos/id/129/800/800",
        "Urban setting with moody lighting.",
        ["urban", "moody", "city", "street"],
    ),
    (
        "3",
        "https://picsum.photos/id/338/800/1000",
        "Artistic silhouette against a sunset.",
        ["silhouette", "artistic", "sunset", "warm"],
    ),
    (
        "4",
        "https://picsum.photos/id/331/800/1200",
        "Fashion style shot with high contrast.",
        ["fashion", "contrast", "style", "studio"],
    ),
)


def sample_photos(now_ms: int) -> list[Photo]:
    """Seed set shown when nothing has been persisted yet, newest first."""
    return [
        Photo(
            id=photo_id,
            url=url,
            description=description,
            tags=list(tags),
            source="sample",
            created_at=now_ms - (index + 1) * 100_000,
        )
        for index, (photo_id, url, description, tags) in enumerate(_SAMPLE_RECORDS)
    ]
