from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path
from typing import Optional
from urllib.parse import quote

import requests
from reportlab.lib.utils import ImageReader

from fieldsheets import config

log = logging.getLogger("uvicorn.error")


class ImageLoadError(Exception):
    """An image could not be fetched or decoded."""


class BlobResolutionError(ImageLoadError):
    """A stored photo reference could not be turned into a location."""


def is_absolute_url(ref: str) -> bool:
    return ref.startswith(("http://", "https://"))


def resolve_blob_url(ref: str, *, storage_url: Optional[str] = None, bucket: Optional[str] = None) -> str:
    """Public URL of a stored photo reference; absolute URLs are returned unchanged."""
    ref = (ref or "").strip()
    if not ref:
        raise BlobResolutionError("Empty photo reference")
    if is_absolute_url(ref):
        return ref
    base = config.STORAGE_URL if storage_url is None else storage_url.rstrip("/")
    if not base:
        raise BlobResolutionError(f"No storage URL configured to resolve '{ref}'")
    bucket = bucket or config.PHOTO_BUCKET
    return f"{base}/storage/v1/object/public/{bucket}/{quote(ref.lstrip('/'), safe='/')}"


class ImageLoader:
    """Loads photo and logo bytes from the local photo directory or blob storage."""

    def __init__(
        self,
        photos_dir: Optional[Path] = None,
        *,
        storage_url: Optional[str] = None,
        bucket: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.photos_dir = Path(photos_dir or config.PHOTOS_DIR).resolve()
        self.storage_url = storage_url
        self.bucket = bucket
        self.timeout = config.HTTP_TIMEOUT_SEC if timeout is None else timeout
        if session is None:
            session = requests.Session()
            session.headers["User-Agent"] = config.USER_AGENT
        self.session = session

    def local_path(self, ref: str) -> Optional[Path]:
        if is_absolute_url(ref):
            return None
        candidate = (self.photos_dir / ref.lstrip("/")).resolve()
        try:
            candidate.relative_to(self.photos_dir)
        except ValueError:
            return None
        if candidate.is_file():
            return candidate
        return None

    def fetch(self, ref: str) -> bytes:
        try:
            path = self.local_path(ref)
            if path is not None:
                return path.read_bytes()
        except (OSError, ValueError) as exc:
            raise ImageLoadError(f"Could not read local photo {ref!r}: {exc}") from exc
        url = resolve_blob_url(ref, storage_url=self.storage_url, bucket=self.bucket)
        try:
            resp = self.session.get(url, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise ImageLoadError(f"Could not download {url}: {exc}") from exc
        return resp.content

    def load(self, ref: str) -> bytes:
        data = self.fetch(ref)
        try:
            ImageReader(BytesIO(data)).getSize()
        except Exception as exc:
            raise ImageLoadError(f"Unreadable image data for '{ref}'") from exc
        return data


__all__ = [
    "BlobResolutionError",
    "ImageLoadError",
    "ImageLoader",
    "resolve_blob_url",
]
