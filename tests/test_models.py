import pytest
from pydantic import ValidationError

from lumina.domain.models import Photo
from lumina.domain.samples import sample_photos


def test_photo_accepts_camel_case_record() -> None:
    photo = Photo.model_validate(
        {
            "id": "42",
            "url": "https://picsum.photos/id/1/800/800",
            "tags": ["cat"],
            "createdAt": 1700000000000,
            "source": "sample",
        }
    )
    assert photo.created_at == 1700000000000
    assert photo.description is None


def test_photo_record_uses_camel_case_and_omits_missing_fields() -> None:
    photo = Photo(id="1", url="data:image/png;base64,AAAA", tags=[], created_at=5, source="upload")
    assert photo.to_record() == {
        "id": "1",
        "url": "data:image/png;base64,AAAA",
        "tags": [],
        "createdAt": 5,
        "source": "upload",
    }


def test_photo_is_immutable() -> None:
    photo = Photo(id="1", url="https://example.com/a.jpg", created_at=5, source="upload")
    with pytest.raises(ValidationError):
        photo.description = "changed"


def test_photo_rejects_unknown_source_and_blank_url() -> None:
    with pytest.raises(ValidationError):
        Photo(id="1", url="https://example.com/a.jpg", created_at=5, source="scanned")
    with pytest.raises(ValidationError):
        Photo(id="1", url="  ", created_at=5, source="upload")


def test_matches_tags_and_description_by_substring() -> None:
    photo = Photo(
        id="1",
        url="https://example.com/a.jpg",
        tags=["Sunset", "warm"],
        description="Artistic silhouette",
        created_at=5,
        source="sample",
    )
    assert photo.matches("sun")
    assert photo.matches("silhou")
    assert not photo.matches("city")


def test_sample_photos_are_newest_first() -> None:
    photos = sample_photos(1_000_000)
    assert [photo.id for photo in photos] == ["1", "2", "3", "4"]
    assert [photo.created_at for photo in photos] == [900_000, 800_000, 700_000, 600_000]
    assert all(photo.source == "sample" for photo in photos)
