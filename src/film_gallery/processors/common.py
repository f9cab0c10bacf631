"""Common functions shared by the processing and upload stages."""

import os
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Mapping, Tuple, Union

from ..core import (
    AlbumManifest,
    GalleryConfig,
    ImageInfo,
    NewImage,
    PathNotFound,
    ProcessResult,
    ReusedImage,
    SourceReadFailure,
    decode_image,
    ensure_supported_image,
    file_content_hash,
    get_logger,
    hash_file,
    is_supported_image,
    transform_image,
)


@dataclass
class UploadSummary:
    """Outcome of one album upload run."""

    album_id: str
    manifest: AlbumManifest
    total_images: int
    reused_count: int
    uploaded_count: int
    resumed: bool
    elapsed: float = 0.0
    uploaded_ids: List[str] = field(default_factory=list)


def collect_image_paths(paths: Iterable[Union[str, Path]]) -> List[Path]:
    """
    Expand user-supplied paths into a sorted list of supported image files.

    Files with unsupported extensions are skipped silently; directories are
    walked recursively, following symlinks. A file reached through more
    than one argument, or through a symlink, is listed once under the first
    path that reached it.

    Raises:
        PathNotFound: If any supplied path does not exist
    """
    image_paths: List[Path] = []
    seen = set()

    for raw_path in paths:
        path = Path(raw_path)
        if not path.exists():
            raise PathNotFound(path)

        if path.is_file():
            if is_supported_image(path):
                _append_unique(image_paths, seen, path)
        elif path.is_dir():
            for dirpath, _dirnames, filenames in os.walk(path, followlinks=True):
                for filename in filenames:
                    entry = Path(dirpath) / filename
                    if entry.is_file() and is_supported_image(entry):
                        _append_unique(image_paths, seen, entry)

    image_paths.sort()
    return image_paths


def _append_unique(image_paths: List[Path], seen: set, path: Path) -> None:
    resolved = path.resolve()
    if resolved not in seen:
        seen.add(resolved)
        image_paths.append(path)


def hash_source_file(path: Path) -> str:
    """Stream a source file through SHA-256 without holding it in memory."""
    try:
        content_hash, _size = hash_file(path)
    except FileNotFoundError as e:
        raise PathNotFound(path) from e
    except OSError as e:
        raise SourceReadFailure(f"Failed to read {path}: {e}") from e
    return content_hash


def read_source_file(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except FileNotFoundError as e:
        raise PathNotFound(path) from e
    except OSError as e:
        raise SourceReadFailure(f"Failed to read {path}: {e}") from e


def process_single_image(
    path: Path, reuse_index: Mapping[str, ImageInfo], config: GalleryConfig
) -> ProcessResult:
    """
    Hash one file; reuse its existing entry or transform it for upload.

    Unchanged files are only streamed through the hash. The bytes are read
    into memory only for files that need new renditions, and the hash of
    those bytes is the one recorded.
    """
    logger = get_logger("processor")
    ensure_supported_image(path)

    existing = reuse_index.get(hash_source_file(path))
    if existing is not None:
        logger.debug(f"[{path.name}] Unchanged, reusing image {existing.id}")
        return ReusedImage(info=existing)

    data = read_source_file(path)
    content_hash = file_content_hash(data)

    image_id = str(uuid.uuid4())
    image = decode_image(data, str(path))
    logger.debug(f"[{path.name}] Loaded image: {image.size[0]}x{image.size[1]}")
    processed = transform_image(
        image, config, source_bytes=data, source_extension=path.suffix
    )
    return NewImage(
        image_id=image_id,
        original_filename=path.name,
        content_hash=content_hash,
        processed=processed,
    )


def split_results(
    results: Iterable[ProcessResult],
) -> Tuple[List[ImageInfo], List[NewImage]]:
    """Separate reused entries from images that still need uploading."""
    reused: List[ImageInfo] = []
    new_images: List[NewImage] = []
    for result in results:
        if isinstance(result, ReusedImage):
            reused.append(result.info)
        else:
            new_images.append(result)
    return reused, new_images


def log_configuration(config: GalleryConfig, album_name: str, album_id: str, total: int):
    """Log run configuration."""
    logger = get_logger("processor")
    logger.info("=" * 80)
    logger.info("FILM GALLERY ALBUM UPLOAD")
    logger.info("=" * 80)
    logger.info(f"  Album:          {album_name}")
    logger.info(f"  Album ID:       {album_id}")
    logger.info(f"  Image set size: {total}")
    logger.info(f"  Destination:    s3://{config.bucket}/{album_id}/")
    logger.info(
        f"  Renditions:     preview {config.preview_max_dimension}px "
        f"(q{config.preview_quality}), thumbnail {config.thumbnail_max_dimension}px "
        f"(q{config.thumbnail_quality})"
    )
    logger.info(
        f"  Workers:        {config.max_workers} processing, "
        f"{config.max_concurrent_uploads} concurrent uploads"
    )
    logger.info("=" * 80)


def log_final_statistics(summary: UploadSummary):
    """Log final run statistics."""
    logger = get_logger("processor")
    logger.info("=" * 80)
    logger.info("ALBUM COMPLETE")
    logger.info("=" * 80)
    logger.info(f"Total execution time: {summary.elapsed:.1f}s")
    logger.info(f"Total images: {summary.total_images}")
    logger.info(f"Already uploaded: {summary.reused_count}")
    logger.info(f"Newly uploaded: {summary.uploaded_count}")
    logger.info("=" * 80)
