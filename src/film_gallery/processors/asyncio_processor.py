"""AsyncIO upload stage - writes renditions concurrently over one shared client."""

import asyncio
from typing import Callable, List, Tuple

from ..core import GalleryConfig, ImageInfo, NewImage, get_logger
from ..core.error_handling import StageErrorCollector
from ..core.manifest import album_key
from ..core.protocols import AsyncObjectStoreProtocol

JPEG_CONTENT_TYPE = "image/jpeg"


def rendition_uploads(
    album_id: str, item: NewImage, info: ImageInfo
) -> List[Tuple[str, bytes, str]]:
    """(key, bytes, content type) for the three renditions of one new image."""
    processed = item.processed
    return [
        (album_key(album_id, info.original_path), processed.original, processed.original_content_type),
        (album_key(album_id, info.preview_path), processed.preview, JPEG_CONTENT_TYPE),
        (album_key(album_id, info.thumbnail_path), processed.thumbnail, JPEG_CONTENT_TYPE),
    ]


async def upload_single_image_async(
    store: AsyncObjectStoreProtocol,
    album_id: str,
    item: NewImage,
    semaphore: asyncio.Semaphore,
    uploaded_keys: List[str],
) -> ImageInfo:
    """Upload one image's renditions and build its manifest entry."""
    logger = get_logger("asyncio-processor")
    info = ImageInfo.for_new_image(
        image_id=item.image_id,
        original_filename=item.original_filename,
        width=item.processed.width,
        height=item.processed.height,
        content_hash=item.content_hash,
        original_extension=item.processed.original_extension,
    )

    async with semaphore:
        for key, data, content_type in rendition_uploads(album_id, item, info):
            logger.debug(f"[{item.original_filename}] Uploading {key}")
            await store.put(key, data, content_type)
            # Single event-loop thread, no lock needed.
            uploaded_keys.append(key)

    return info


async def cleanup_uploaded_keys(store: AsyncObjectStoreProtocol, keys: List[str]) -> None:
    """Best-effort removal of renditions written by a failed run."""
    logger = get_logger("asyncio-processor")
    logger.warning(f"Removing {len(keys)} objects uploaded before the failure")
    results = await asyncio.gather(*(store.delete(key) for key in keys), return_exceptions=True)
    for key, result in zip(keys, results):
        if isinstance(result, Exception):
            logger.error(f"Failed to remove orphaned object {key}: {result}")


async def process_batch_async(
    new_images: List[NewImage],
    album_id: str,
    config: GalleryConfig,
    store: AsyncObjectStoreProtocol,
) -> List[ImageInfo]:
    """
    Upload all new images concurrently through an already opened store.

    At most ``config.max_concurrent_uploads`` images are in flight at once.
    No task is cancelled when a sibling fails: every task runs to completion
    and the first error (in completion order) is raised afterwards.
    """
    logger = get_logger("asyncio-processor")
    semaphore = asyncio.Semaphore(config.max_concurrent_uploads)
    uploaded_keys: List[str] = []
    results: List[ImageInfo] = []
    total = len(new_images)

    with StageErrorCollector(f"Uploading {total} images") as errors:

        async def upload_with_tracking(item: NewImage) -> None:
            try:
                info = await upload_single_image_async(
                    store, album_id, item, semaphore, uploaded_keys
                )
            except Exception as e:
                errors.add_error(e, item_identifier=item.original_filename)
                return
            results.append(info)
            logger.info(f"[{len(results)}/{total}] Uploaded: {item.original_filename}")

        await asyncio.gather(*(upload_with_tracking(item) for item in new_images))

        if errors.failed and config.cleanup_on_failure and uploaded_keys:
            await cleanup_uploaded_keys(store, uploaded_keys)

    return results


def process_batch(
    new_images: List[NewImage],
    album_id: str,
    config: GalleryConfig,
    store_factory: Callable[[], AsyncObjectStoreProtocol],
) -> List[ImageInfo]:
    """
    Upload a batch of new images using asyncio.

    This is the synchronous wrapper that runs the async stage. The store is
    created by ``store_factory`` and lives only for this call.

    Args:
        new_images: Transformed images to upload
        album_id: Album key prefix
        config: Run configuration
        store_factory: Returns an unopened async store

    Returns:
        One `ImageInfo` per uploaded image, in completion order
    """

    async def _run() -> List[ImageInfo]:
        async with store_factory() as opened:
            return await process_batch_async(new_images, album_id, config, opened)

    return asyncio.run(_run())
