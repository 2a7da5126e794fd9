"""Tests for photo reference resolution and image loading."""

from __future__ import annotations

from pathlib import Path

import pytest
import requests

from fieldsheets.blobs import BlobResolutionError, ImageLoader, ImageLoadError, resolve_blob_url
from fieldsheets.layout import PageBuilder
from tests.conftest import PNG_BYTES


class FakeResponse:
    def __init__(self, content: bytes, status: int = 200) -> None:
        self.content = content
        self.status_code = status

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeSession:
    def __init__(self, responses=None, error=None) -> None:
        self.responses = responses or {}
        self.error = error
        self.urls = []

    def get(self, url, timeout=None):
        self.urls.append((url, timeout))
        if self.error is not None:
            raise self.error
        return self.responses.get(url, FakeResponse(b"", 404))


class TestResolveBlobUrl:
    def test_storage_reference(self):
        url = resolve_blob_url("site-1/PZ 1.png", storage_url="https://store.example.com/", bucket="photos")
        assert url == "https://store.example.com/storage/v1/object/public/photos/site-1/PZ%201.png"

    def test_absolute_url_is_unchanged(self):
        url = "https://cdn.example.com/logo.png"
        assert resolve_blob_url(url, storage_url="") == url

    def test_empty_reference(self):
        with pytest.raises(BlobResolutionError):
            resolve_blob_url("  ", storage_url="https://store.example.com")

    def test_missing_storage_url(self):
        with pytest.raises(BlobResolutionError):
            resolve_blob_url("site-1/a.png", storage_url="")

    def test_resolution_error_is_an_image_error(self):
        assert issubclass(BlobResolutionError, ImageLoadError)


class TestImageLoader:
    def test_local_file_wins(self, tmp_path):
        (tmp_path / "site-1").mkdir()
        (tmp_path / "site-1" / "a.png").write_bytes(PNG_BYTES)
        session = FakeSession()
        loader = ImageLoader(tmp_path, storage_url="https://store.example.com", session=session)
        assert loader.load("site-1/a.png") == PNG_BYTES
        assert session.urls == []

    def test_local_lookup_stays_inside_photo_dir(self, tmp_path):
        photos = tmp_path / "photos"
        photos.mkdir()
        (tmp_path / "secret.png").write_bytes(PNG_BYTES)
        loader = ImageLoader(photos, storage_url="", session=FakeSession())
        assert loader.local_path("../secret.png") is None

    def test_download(self, tmp_path):
        url = "https://store.example.com/storage/v1/object/public/photos/site-1/b.png"
        session = FakeSession({url: FakeResponse(PNG_BYTES)})
        loader = ImageLoader(
            tmp_path, storage_url="https://store.example.com", bucket="photos", timeout=3, session=session
        )
        assert loader.load("site-1/b.png") == PNG_BYTES
        assert session.urls == [(url, 3)]

    def test_http_error(self, tmp_path):
        loader = ImageLoader(tmp_path, storage_url="https://store.example.com", session=FakeSession())
        with pytest.raises(ImageLoadError):
            loader.load("site-1/missing.png")

    def test_network_error(self, tmp_path):
        session = FakeSession(error=requests.ConnectionError("unreachable"))
        loader = ImageLoader(tmp_path, session=session)
        with pytest.raises(ImageLoadError):
            loader.load("https://cdn.example.com/logo.png")

    def test_undecodable_bytes(self, tmp_path):
        (tmp_path / "broken.png").write_bytes(b"not an image")
        loader = ImageLoader(tmp_path, storage_url="", session=FakeSession())
        with pytest.raises(ImageLoadError):
            loader.load("broken.png")

    def test_default_session_identifies_itself(self, tmp_path):
        loader = ImageLoader(tmp_path)
        assert loader.session.headers["User-Agent"].startswith("fieldsheets")

    def test_malformed_reference_is_an_image_error(self, tmp_path):
        loader = ImageLoader(tmp_path, storage_url="", session=FakeSession())
        with pytest.raises(ImageLoadError):
            loader.load("bad\x00ref.jpg")

    def test_unreadable_local_file(self, tmp_path, monkeypatch):
        (tmp_path / "locked.png").write_bytes(PNG_BYTES)

        def refuse(self):
            raise PermissionError("denied")

        monkeypatch.setattr(Path, "read_bytes", refuse)
        loader = ImageLoader(tmp_path, storage_url="", session=FakeSession())
        with pytest.raises(ImageLoadError):
            loader.load("locked.png")

    def test_malformed_reference_is_skipped_by_layout(self, tmp_path):
        builder = PageBuilder(ImageLoader(tmp_path, storage_url="", session=FakeSession()))
        assert not builder.image(10, 10, "bad\x00ref.jpg", 10, 10)
        assert builder.build().images() == []
