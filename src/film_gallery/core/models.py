"""Shared data models for film-gallery."""

import os
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Union

from pydantic import AliasChoices, BaseModel, Field, model_validator

URL_FIELDS = ("thumbnail_url", "preview_url", "original_url")


def default_worker_count() -> int:
    return os.cpu_count() or 1


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class GalleryConfig(BaseModel):
    """Configuration for one gallery run."""

    bucket: str = Field(min_length=1)
    endpoint_url: Optional[str] = None
    region_name: Optional[str] = None
    preview_max_dimension: int = Field(default=2048, gt=0)
    thumbnail_max_dimension: int = Field(default=400, gt=0)
    preview_quality: int = Field(default=90, ge=1, le=100)
    thumbnail_quality: int = Field(default=85, ge=1, le=100)
    original_quality: int = Field(default=95, ge=1, le=100)
    reencode_originals: bool = False
    max_workers: int = Field(default_factory=default_worker_count, gt=0)
    max_concurrent_uploads: int = Field(default=16, gt=0)
    presign_ttl: int = Field(default=3600, gt=0)
    cleanup_on_failure: bool = False
    debug: bool = False


class ImageInfo(BaseModel):
    """One image entry of an album manifest."""

    id: str
    original_filename: str
    width: int
    height: int
    content_hash: str = Field(
        validation_alias=AliasChoices("content_hash", "file_hash")
    )
    thumbnail_path: str
    preview_path: str
    original_path: str
    # Attached for read responses only, never persisted.
    thumbnail_url: Optional[str] = None
    preview_url: Optional[str] = None
    original_url: Optional[str] = None

    @classmethod
    def for_new_image(
        cls,
        image_id: str,
        original_filename: str,
        width: int,
        height: int,
        content_hash: str,
        original_extension: str = ".jpg",
    ) -> "ImageInfo":
        """Build the entry for a freshly uploaded image, with album-relative paths."""
        return cls(
            id=image_id,
            original_filename=original_filename,
            width=width,
            height=height,
            content_hash=content_hash,
            thumbnail_path=f"thumbnails/{image_id}.jpg",
            preview_path=f"previews/{image_id}.jpg",
            original_path=f"originals/{image_id}{original_extension}",
        )

    def rendition_paths(self) -> List[str]:
        return [self.original_path, self.preview_path, self.thumbnail_path]


class AlbumManifest(BaseModel):
    """The single record describing an album: identity, name and images."""

    id: str
    name: str
    created_at: str = Field(default_factory=utc_timestamp)
    images: List[ImageInfo] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_unique_image_ids(self) -> "AlbumManifest":
        seen = set()
        for image in self.images:
            if image.id in seen:
                raise ValueError(f"Duplicate image id in manifest: {image.id}")
            seen.add(image.id)
        return self

    @classmethod
    def new(cls, name: str) -> "AlbumManifest":
        return cls(id=str(uuid.uuid4()), name=name)

    @classmethod
    def with_id(
        cls, name: str, album_id: str, created_at: Optional[str] = None
    ) -> "AlbumManifest":
        if created_at is None:
            return cls(id=album_id, name=name)
        return cls(id=album_id, name=name, created_at=created_at)

    def add_image(self, info: ImageInfo) -> None:
        if any(image.id == info.id for image in self.images):
            raise ValueError(f"Duplicate image id in manifest: {info.id}")
        self.images.append(info)

    def image_ids(self) -> List[str]:
        return [image.id for image in self.images]

    def to_json(self, include_urls: bool = False) -> str:
        """
        Serialize to the manifest wire format.

        Presigned URLs are only emitted with ``include_urls`` (read responses),
        and even then only when set.
        """
        if include_urls:
            return self.model_dump_json(indent=2, exclude_none=True)
        return self.model_dump_json(
            indent=2, exclude={"images": {"__all__": set(URL_FIELDS)}}
        )

    @classmethod
    def from_json(cls, data: Union[str, bytes]) -> "AlbumManifest":
        return cls.model_validate_json(data)


@dataclass
class ProcessedImage:
    """The three encoded renditions of one source image. Never persisted."""

    original: bytes
    preview: bytes
    thumbnail: bytes
    width: int
    height: int
    original_extension: str = ".jpg"
    original_content_type: str = "image/jpeg"


@dataclass
class ReusedImage:
    """A source file whose content hash is already present in the album."""

    info: ImageInfo


@dataclass
class NewImage:
    """A source file that was transformed and still needs uploading."""

    image_id: str
    original_filename: str
    content_hash: str
    processed: ProcessedImage


ProcessResult = Union[ReusedImage, NewImage]
