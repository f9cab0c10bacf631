"""Exception hierarchy for film-gallery."""

from __future__ import annotations

from typing import Optional


class GalleryError(Exception):
    """Base exception for all film-gallery errors."""


class ConfigurationError(GalleryError):
    """Error raised for invalid configuration options."""


class PathNotFound(GalleryError):
    """A source path supplied by the user does not exist."""

    def __init__(self, path: object) -> None:
        super().__init__(f"Path does not exist: {path}")
        self.path = path


class NoImagesFound(GalleryError):
    """None of the supplied paths yielded a supported image."""


class UnsupportedFormat(GalleryError):
    """The file extension is not one of the supported raster formats."""

    def __init__(self, path: object) -> None:
        super().__init__(f"Unsupported image format: {path}")
        self.path = path


class SourceReadFailure(GalleryError):
    """A source file could not be read from disk."""


class DecodeFailure(GalleryError):
    """Image bytes could not be decoded."""


class TransformFailure(GalleryError):
    """Resizing or encoding a rendition failed."""


class StoreError(GalleryError):
    """Base class for object store failures."""

    def __init__(self, message: str, key: Optional[str] = None) -> None:
        super().__init__(message)
        self.key = key


class StoreReadFailure(StoreError):
    """Reading from the object store failed."""


class StoreWriteFailure(StoreError):
    """Writing to (or deleting from) the object store failed."""


class ObjectNotFound(StoreError):
    """The requested key does not exist in the object store."""


class CorruptManifest(GalleryError):
    """An album manifest exists but could not be parsed."""


class AlbumNotFound(GalleryError):
    """No manifest exists for the requested album id."""

    def __init__(self, album_id: str) -> None:
        super().__init__(f"Album not found: {album_id}")
        self.album_id = album_id
