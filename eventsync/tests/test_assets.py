"""Tests for the local poster store."""

import pytest

from eventsync.storage import AssetUploadError
from eventsync.storage.assets import poster_path


def test_poster_path_uses_user_and_timestamp():
    assert poster_path("user-1", "Flyer.JPG", timestamp_ms=1700000000000) == "user-1/1700000000000.jpg"
    assert poster_path("user-1", "flyer", timestamp_ms=5) == "user-1/5"


def test_upload_writes_file_and_returns_public_url(assets, tmp_path):
    url = assets.upload("user-1/1.png", b"png-bytes")

    assert url == "http://assets.test/event-posters/user-1/1.png"
    assert (tmp_path / "event-posters" / "user-1" / "1.png").read_bytes() == b"png-bytes"


def test_upload_refuses_to_overwrite(assets):
    assets.upload("user-1/1.png", b"first")

    with pytest.raises(AssetUploadError):
        assets.upload("user-1/1.png", b"second")


@pytest.mark.parametrize("path", ["../escape.png", "/etc/passwd", "user-1/../../escape.png"])
def test_upload_rejects_paths_outside_the_bucket(assets, path):
    with pytest.raises(AssetUploadError):
        assets.upload(path, b"data")
