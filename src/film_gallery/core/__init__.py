"""Core utilities and shared components for film-gallery."""

from .fingerprint import album_identity, file_content_hash, hash_file
from .image_utils import (
    decode_image,
    encode_jpeg,
    ensure_supported_image,
    guess_content_type,
    is_supported_image,
    resize_to_bound,
    transform_image,
)
from .logging_config import get_logger, set_debug_logging, setup_logger
from .exceptions import (
    AlbumNotFound,
    ConfigurationError,
    CorruptManifest,
    DecodeFailure,
    GalleryError,
    NoImagesFound,
    ObjectNotFound,
    PathNotFound,
    SourceReadFailure,
    StoreError,
    StoreReadFailure,
    StoreWriteFailure,
    TransformFailure,
    UnsupportedFormat,
)
from .manifest import (
    assemble_manifest,
    build_reuse_index,
    load_existing_manifest,
    manifest_key,
    parse_manifest,
    publish_manifest,
    serialize_manifest,
)
from .models import (
    AlbumManifest,
    GalleryConfig,
    ImageInfo,
    NewImage,
    ProcessedImage,
    ProcessResult,
    ReusedImage,
)

__all__ = [
    "GalleryConfig",
    "AlbumManifest",
    "ImageInfo",
    "ProcessedImage",
    "ReusedImage",
    "NewImage",
    "ProcessResult",
    "album_identity",
    "file_content_hash",
    "hash_file",
    "decode_image",
    "encode_jpeg",
    "ensure_supported_image",
    "guess_content_type",
    "is_supported_image",
    "resize_to_bound",
    "transform_image",
    "assemble_manifest",
    "build_reuse_index",
    "load_existing_manifest",
    "manifest_key",
    "parse_manifest",
    "publish_manifest",
    "serialize_manifest",
    "setup_logger",
    "get_logger",
    "set_debug_logging",
    "GalleryError",
    "ConfigurationError",
    "PathNotFound",
    "NoImagesFound",
    "UnsupportedFormat",
    "SourceReadFailure",
    "DecodeFailure",
    "TransformFailure",
    "StoreError",
    "StoreReadFailure",
    "StoreWriteFailure",
    "ObjectNotFound",
    "CorruptManifest",
    "AlbumNotFound",
]
