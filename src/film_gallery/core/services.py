"""Read-side and administrative album services."""

from typing import Optional, Tuple

from .exceptions import AlbumNotFound, CorruptManifest
from .image_utils import guess_content_type
from .logging_config import get_logger
from .manifest import album_key, album_prefix, load_existing_manifest, manifest_key
from .models import AlbumManifest
from .protocols import ObjectStoreProtocol


class AlbumReader:
    """Serves published albums to readers (web handlers, CLI)."""

    def __init__(self, store: ObjectStoreProtocol, presign_ttl: int = 3600):
        self._store = store
        self._presign_ttl = presign_ttl
        self._logger = get_logger("reader")

    def get_manifest(
        self, album_id: str, presign: bool = False
    ) -> Optional[AlbumManifest]:
        """
        Return the album manifest, or None if it is missing or unparsable.

        With ``presign`` set, each image gets time-limited URLs for its three
        renditions. The stored paths stay album-relative.
        """
        try:
            manifest = load_existing_manifest(self._store, album_id)
        except CorruptManifest as e:
            self._logger.error(f"Failed to parse manifest for album {album_id}: {e}")
            return None

        if manifest is None:
            self._logger.info(f"Album not found: {album_id}")
            return None

        if presign:
            for image in manifest.images:
                image.thumbnail_url = self.presign_image(album_id, image.thumbnail_path)
                image.preview_url = self.presign_image(album_id, image.preview_path)
                image.original_url = self.presign_image(album_id, image.original_path)
        return manifest

    def get_image(self, album_id: str, path: str) -> Tuple[bytes, str]:
        """
        Fetch one rendition by album-relative path.

        Raises:
            ObjectNotFound: If the object does not exist
        """
        key = album_key(album_id, path)
        self._logger.debug(f"Image request: album_id={album_id}, key={key}")
        return self._store.get(key), guess_content_type(key)

    def presign_image(self, album_id: str, path: str, ttl: Optional[int] = None) -> str:
        return self._store.presign(album_key(album_id, path), ttl or self._presign_ttl)


class AlbumDeletionService:
    """Removes every object belonging to an album."""

    def __init__(self, store: ObjectStoreProtocol):
        self._store = store
        self._logger = get_logger("delete")

    def delete_album(self, album_id: str) -> int:
        """
        Delete the album's manifest and renditions.

        Raises:
            AlbumNotFound: If no manifest exists; nothing is deleted in that case

        Returns:
            Number of objects deleted
        """
        if not self._store.exists(manifest_key(album_id)):
            raise AlbumNotFound(album_id)

        self._logger.info(f"Deleting album: {album_id}")
        keys = self._store.list_with_prefix(album_prefix(album_id))
        for key in keys:
            self._store.delete(key)
        self._logger.info(f"Deleted {len(keys)} objects for album {album_id}")
        return len(keys)
