"""
Incremental album upload.

Fingerprint → existing-album lookup → parallel processing (thread pool) →
concurrent upload (asyncio) → manifest publish.
"""

import time
from pathlib import Path
from typing import Callable, Iterable, List, Mapping, Optional, Union

from .core import (
    GalleryConfig,
    ImageInfo,
    NewImage,
    NoImagesFound,
    ProcessResult,
    album_identity,
    assemble_manifest,
    build_reuse_index,
    get_logger,
    load_existing_manifest,
    publish_manifest,
)
from .core.protocols import AsyncObjectStoreProtocol, ObjectStoreProtocol
from .processors import asyncio_upload_batch, multithread_process_batch
from .processors.common import (
    UploadSummary,
    collect_image_paths,
    log_configuration,
    log_final_statistics,
    split_results,
)

# Define precise types for the two stage functions
ProcessBatchFunction = Callable[
    [List[Path], Mapping[str, ImageInfo], GalleryConfig], List[ProcessResult]
]
UploadBatchFunction = Callable[
    [List[NewImage], str, GalleryConfig, Callable[[], AsyncObjectStoreProtocol]],
    List[ImageInfo],
]


def run_upload(
    paths: Iterable[Union[str, Path]],
    name: str,
    config: GalleryConfig,
    store: ObjectStoreProtocol,
    async_store_factory: Callable[[], AsyncObjectStoreProtocol],
    process_batch_fn: Optional[ProcessBatchFunction] = None,
    upload_batch_fn: Optional[UploadBatchFunction] = None,
) -> UploadSummary:
    """
    Publish an album from local image paths, or resume a previous one.

    Args:
        paths: Files and/or directories to publish
        name: Album label stored in the manifest
        config: Run configuration
        store: Blocking store used for the manifest lookup and publish
        async_store_factory: Returns an unopened async store for the upload stage
        process_batch_fn: Processing stage override (defaults to the thread pool)
        upload_batch_fn: Upload stage override (defaults to asyncio)

    Returns:
        An `UploadSummary` describing the published manifest

    Raises:
        PathNotFound: If a supplied path does not exist
        NoImagesFound: If no supported images were found
        GalleryError: Any stage failure; the manifest is not published
    """
    process_batch_fn = process_batch_fn or multithread_process_batch
    upload_batch_fn = upload_batch_fn or asyncio_upload_batch

    logger = get_logger("processor")
    start_time = time.time()

    image_paths = collect_image_paths(paths)
    if not image_paths:
        raise NoImagesFound("No images found in the provided paths")

    album_id = album_identity(image_paths)
    log_configuration(config, name, album_id, len(image_paths))

    existing = load_existing_manifest(store, album_id)
    if existing is not None:
        logger.info(
            f"Found existing album with this image set ({len(existing.images)} images); "
            "checking which images need to be uploaded"
        )
    else:
        logger.info("New album - will upload all images")
    reuse_index = build_reuse_index(existing)

    results = process_batch_fn(image_paths, reuse_index, config)
    reused, new_images = split_results(results)
    logger.info(
        f"Images: {len(image_paths)} total ({len(reused)} already uploaded, "
        f"{len(new_images)} to upload)"
    )

    uploaded: List[ImageInfo] = []
    if new_images:
        uploaded = upload_batch_fn(new_images, album_id, config, async_store_factory)
        # Rendition bytes now belong to the store.
        new_images.clear()

    manifest = assemble_manifest(album_id, name, reused, uploaded, existing=existing)
    publish_manifest(store, manifest)

    summary = UploadSummary(
        album_id=album_id,
        manifest=manifest,
        total_images=len(manifest.images),
        reused_count=len(manifest.images) - len(uploaded),
        uploaded_count=len(uploaded),
        resumed=existing is not None,
        elapsed=time.time() - start_time,
        uploaded_ids=[info.id for info in uploaded],
    )
    log_final_statistics(summary)
    return summary
