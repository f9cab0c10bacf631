"""Multithreaded processing stage - hashes and transforms files on a thread pool."""

from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Dict, List, Mapping

from ..core import GalleryConfig, ImageInfo, ProcessResult, ReusedImage, get_logger
from ..core.error_handling import StageErrorCollector
from .common import process_single_image


def process_batch(
    paths: List[Path], reuse_index: Mapping[str, ImageInfo], config: GalleryConfig
) -> List[ProcessResult]:
    """
    Hash, dedup and transform every candidate file in parallel.

    One task per file is scheduled on a pool of ``config.max_workers``
    threads (CPU count by default); Pillow and hashlib release the GIL for the
    heavy work. Results come back in completion order.

    Fail fast: after the first failure, tasks that have not started are
    cancelled, running ones finish, all partial results are discarded and
    the first error is raised.

    Args:
        paths: Candidate image files
        reuse_index: Content hash to existing entry, read-only
        config: Run configuration

    Returns:
        One `ReusedImage` or `NewImage` per path
    """
    logger = get_logger("multithread-processor")
    results: List[ProcessResult] = []
    if not paths:
        return results

    max_workers = min(config.max_workers, len(paths))
    total = len(paths)
    done = 0

    with StageErrorCollector(f"Processing {total} images") as errors:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            future_to_path: Dict[Future, Path] = {
                executor.submit(process_single_image, path, reuse_index, config): path
                for path in paths
            }

            for future in as_completed(future_to_path):
                path = future_to_path[future]
                if future.cancelled():
                    continue
                try:
                    result = future.result()
                except Exception as e:
                    if not errors.failed:
                        for pending in future_to_path:
                            pending.cancel()
                    errors.add_error(e, item_identifier=str(path))
                    continue

                done += 1
                action = "Skipped (exists)" if isinstance(result, ReusedImage) else "Processed"
                logger.info(f"[{done}/{total}] {action}: {path.name}")
                results.append(result)

    return results
