"""Content and album fingerprints."""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Iterable, Tuple, Union

ALBUM_ID_LENGTH = 16
PATH_SEPARATOR = b"\n"


def file_content_hash(data: bytes) -> str:
    """SHA-256 hex digest of raw file bytes; the dedup key for an image."""
    return hashlib.sha256(data).hexdigest()


def hash_file(path: Union[str, Path], chunk_size: int = 1024 * 1024) -> Tuple[str, int]:
    """Stream a file through SHA-256 without loading it whole.

    Returns:
        Tuple of (hex digest, file size in bytes); the digest equals
        ``file_content_hash`` of the same bytes
    """
    h = hashlib.sha256()
    size = 0
    with Path(path).open("rb") as f:
        while True:
            chunk = f.read(chunk_size)
            if not chunk:
                break
            size += len(chunk)
            h.update(chunk)
    return h.hexdigest(), size


def album_identity(paths: Iterable[Union[str, Path]]) -> str:
    """Derive the album id from the set of source paths.

    Paths are compared by their textual form, not their content, so the same
    listing always maps to the same album regardless of traversal order.

    Args:
        paths: Source image paths, in any order

    Returns:
        The first 16 hex characters of SHA-256 over the sorted,
        newline-terminated path strings
    """
    h = hashlib.sha256()
    for path in sorted(str(p) for p in paths):
        h.update(path.encode("utf-8", "surrogateescape"))
        h.update(PATH_SEPARATOR)
    return h.hexdigest()[:ALBUM_ID_LENGTH]
