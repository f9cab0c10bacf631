"""Album manifest lookup, assembly and publication."""

from typing import Dict, Iterable, List, Optional, Union

from pydantic import ValidationError

from .exceptions import CorruptManifest, ObjectNotFound
from .logging_config import get_logger
from .models import AlbumManifest, ImageInfo
from .protocols import ObjectStoreProtocol

MANIFEST_FILENAME = "manifest.json"
MANIFEST_CONTENT_TYPE = "application/json"


def manifest_key(album_id: str) -> str:
    return f"{album_id}/{MANIFEST_FILENAME}"


def album_key(album_id: str, relative_path: str) -> str:
    """Full store key for an album-relative path taken from a manifest."""
    return f"{album_id}/{relative_path.lstrip('/')}"


def album_prefix(album_id: str) -> str:
    return f"{album_id}/"


def serialize_manifest(manifest: AlbumManifest) -> bytes:
    return manifest.to_json().encode("utf-8")


def parse_manifest(data: Union[str, bytes], album_id: str = "") -> AlbumManifest:
    """
    Parse manifest text.

    Raises:
        CorruptManifest: If the text is not valid UTF-8 JSON matching the
            manifest schema, or if image ids repeat
    """
    try:
        if isinstance(data, bytes):
            data = data.decode("utf-8")
        return AlbumManifest.from_json(data)
    except (UnicodeDecodeError, ValidationError) as e:
        label = f" for album {album_id}" if album_id else ""
        raise CorruptManifest(f"Manifest{label} could not be parsed: {e}") from e


def load_existing_manifest(
    store: ObjectStoreProtocol, album_id: str
) -> Optional[AlbumManifest]:
    """Fetch and parse the published manifest for an album, or None if there is none."""
    logger = get_logger("manifest")
    try:
        data = store.get(manifest_key(album_id))
    except ObjectNotFound:
        logger.debug(f"No manifest at {manifest_key(album_id)}")
        return None
    return parse_manifest(data, album_id)


def build_reuse_index(manifest: Optional[AlbumManifest]) -> Dict[str, ImageInfo]:
    """Map content hash to existing image entry, for O(1) dedup lookups."""
    if manifest is None:
        return {}
    return {image.content_hash: image for image in manifest.images}


def assemble_manifest(
    album_id: str,
    name: str,
    reused: Iterable[ImageInfo],
    uploaded: Iterable[ImageInfo],
    existing: Optional[AlbumManifest] = None,
) -> AlbumManifest:
    """
    Merge reused and newly uploaded entries into one manifest.

    Reused entries come first. The creation timestamp of ``existing`` is
    carried forward so resumed albums keep their original ``created_at``.

    Byte-identical files all resolve to the same reused entry. Each repeat
    takes the next unused entry of ``existing`` with that content hash, so
    an album with duplicate files keeps one entry per file; a repeat with no
    spare entry left is dropped.
    """
    created_at = existing.created_at if existing is not None else None
    manifest = AlbumManifest.with_id(name, album_id, created_at=created_at)

    spares: Dict[str, List[ImageInfo]] = {}
    if existing is not None:
        for image in existing.images:
            spares.setdefault(image.content_hash, []).append(image)

    used_ids = set()
    for image in reused:
        if image.id in used_ids:
            candidates = [
                spare for spare in spares.get(image.content_hash, [])
                if spare.id not in used_ids
            ]
            if not candidates:
                get_logger("manifest").debug(
                    f"Dropping repeat of image {image.id}: no spare entry for {image.content_hash}"
                )
                continue
            image = candidates[0]
        used_ids.add(image.id)
        manifest.add_image(image)
    for image in uploaded:
        manifest.add_image(image)
    return manifest


def publish_manifest(store: ObjectStoreProtocol, manifest: AlbumManifest) -> str:
    """Write the manifest, overwriting any previous version. Returns the key."""
    key = manifest_key(manifest.id)
    store.put(key, serialize_manifest(manifest), MANIFEST_CONTENT_TYPE)
    get_logger("manifest").info(
        f"Published manifest {key} with {len(manifest.images)} images"
    )
    return key
