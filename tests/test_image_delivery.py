import pytest

from marketplace.services.image_delivery import fetch_image, guess_content_type
from tests.conftest import PNG_BYTES


def test_fetch_returns_payload_with_caching_headers(storage):
    record = storage.save(PNG_BYTES, "ad_1", filename="photo.png", content_type="image/png")

    response = fetch_image(storage, record.id)

    assert response.status_code == 200
    assert response.body == PNG_BYTES
    assert response.headers["content-type"] == "image/png"
    assert response.headers["cache-control"] == "public, max-age=3600"
    assert response.headers["content-length"] == str(len(PNG_BYTES))


def test_fetch_falls_back_to_suffix_guess(db_storage):
    record = db_storage.save(PNG_BYTES, "ad_1", filename="photo.png", content_type=None)

    response = fetch_image(db_storage, record.id)

    assert response.headers["content-type"] == "image/png"


def test_fetch_falls_back_to_octet_stream_for_unknown_extension(storage):
    record = storage.save(b"opaque", "ad_1", filename="scan.qqq", content_type=None)

    response = fetch_image(storage, record.id)

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/octet-stream"


def test_fetch_unknown_id_is_404_with_empty_body(storage):
    response = fetch_image(storage, "nonexistent-id")

    assert response.status_code == 404
    assert response.body == b""


def test_fetch_missing_file_is_404(fs_storage, images_dir):
    record = fs_storage.save(PNG_BYTES, "ad_1", filename="a.png")
    (images_dir / record.id).unlink()

    assert fetch_image(fs_storage, record.id).status_code == 404


def test_fetch_inconsistent_record_is_500_and_logged(db_storage, db_session, caplog):
    record = db_storage.save(PNG_BYTES, "ad_1")
    record.data = None
    db_session.commit()

    response = fetch_image(db_storage, record.id)

    assert response.status_code == 500
    assert response.body == b""
    assert record.id in caplog.text


@pytest.mark.parametrize(
    "image_id, expected",
    [
        ("ad_1_x.png", "image/png"),
        ("ad_1_x.JPG", "image/jpeg"),
        ("ad_1_x.jpeg", "image/jpeg"),
        ("ad_1_x.gif", "image/gif"),
        ("ad_1_x.webp", "image/webp"),
        ("ad_1_x.bmp", None),
        ("ad_1_x", None),
    ],
)
def test_guess_content_type(image_id, expected):
    assert guess_content_type(image_id) == expected


def test_fetch_serves_stored_text_type_without_charset(storage):
    record = storage.save(b"plain text", "ad_1", filename="notes.txt", content_type="text/plain")

    response = fetch_image(storage, record.id)

    assert response.headers["content-type"] == "text/plain"
