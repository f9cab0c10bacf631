"""Unit tests for album read and delete services."""

import pytest

from film_gallery.core.exceptions import AlbumNotFound, ObjectNotFound, StoreWriteFailure
from film_gallery.core.manifest import MANIFEST_CONTENT_TYPE, manifest_key, publish_manifest
from film_gallery.core.models import AlbumManifest, ImageInfo
from film_gallery.core.services import AlbumDeletionService, AlbumReader
from film_gallery.testing.fakes import FakeObjectStore

ALBUM_ID = "0123456789abcdef"


def publish_album(store: FakeObjectStore, image_ids=("i1", "i2")) -> AlbumManifest:
    manifest = AlbumManifest.with_id("Roll", ALBUM_ID)
    for n, image_id in enumerate(image_ids):
        info = ImageInfo.for_new_image(image_id, f"{image_id}.jpg", 30, 20, f"hash-{n}")
        manifest.add_image(info)
        for path in info.rendition_paths():
            store.put(f"{ALBUM_ID}/{path}", b"jpeg", "image/jpeg")
    publish_manifest(store, manifest)
    return manifest


class TestAlbumReader:
    """Tests for AlbumReader."""

    def test_get_manifest(self):
        """Test reading a published manifest."""
        store = FakeObjectStore()
        published = publish_album(store)

        manifest = AlbumReader(store).get_manifest(ALBUM_ID)

        assert manifest == published
        assert manifest.images[0].preview_url is None

    def test_get_manifest_missing_returns_none(self):
        """Test an unknown album yields None."""
        assert AlbumReader(FakeObjectStore()).get_manifest("ffffffffffffffff") is None

    def test_get_manifest_corrupt_returns_none(self):
        """Test an unparsable manifest is reported as absent."""
        store = FakeObjectStore()
        store.put(manifest_key(ALBUM_ID), b"not json", MANIFEST_CONTENT_TYPE)
        assert AlbumReader(store).get_manifest(ALBUM_ID) is None

    def test_get_manifest_presigned(self):
        """Test presigned URLs for every rendition, with relative paths kept."""
        store = FakeObjectStore()
        publish_album(store)

        manifest = AlbumReader(store, presign_ttl=120).get_manifest(ALBUM_ID, presign=True)

        image = manifest.images[0]
        assert image.thumbnail_url == f"https://fake-store.local/{ALBUM_ID}/thumbnails/i1.jpg?expires=120"
        assert image.preview_url == f"https://fake-store.local/{ALBUM_ID}/previews/i1.jpg?expires=120"
        assert image.original_url == f"https://fake-store.local/{ALBUM_ID}/originals/i1.jpg?expires=120"
        assert image.preview_path == "previews/i1.jpg"

    def test_presign_does_not_touch_stored_manifest(self):
        """Test that read-side URLs are never persisted."""
        store = FakeObjectStore()
        publish_album(store)
        before = store.objects[manifest_key(ALBUM_ID)].body

        AlbumReader(store).get_manifest(ALBUM_ID, presign=True)

        assert store.objects[manifest_key(ALBUM_ID)].body == before
        assert store.count("put") == 7

    def test_get_image(self):
        """Test fetching a rendition returns bytes and content type."""
        store = FakeObjectStore()
        publish_album(store)

        data, content_type = AlbumReader(store).get_image(ALBUM_ID, "previews/i1.jpg")

        assert data == b"jpeg"
        assert content_type == "image/jpeg"

    def test_get_image_missing(self):
        """Test a missing rendition raises ObjectNotFound."""
        with pytest.raises(ObjectNotFound):
            AlbumReader(FakeObjectStore()).get_image(ALBUM_ID, "previews/nope.jpg")

    def test_presign_image_custom_ttl(self):
        store = FakeObjectStore()
        url = AlbumReader(store, presign_ttl=3600).presign_image(ALBUM_ID, "originals/i1.jpg", ttl=60)
        assert url.endswith("?expires=60")


class TestAlbumDeletionService:
    """Tests for AlbumDeletionService."""

    def test_delete_album_removes_everything_under_prefix(self):
        """Test deletion of manifest and renditions, leaving other albums alone."""
        store = FakeObjectStore()
        publish_album(store)
        store.put("ffffffffffffffff/manifest.json", b"{}", MANIFEST_CONTENT_TYPE)

        deleted = AlbumDeletionService(store).delete_album(ALBUM_ID)

        assert deleted == 7
        assert store.keys(f"{ALBUM_ID}/") == []
        assert store.keys() == ["ffffffffffffffff/manifest.json"]

    def test_delete_missing_album_raises_before_mutation(self):
        """Test that deleting an unknown album changes nothing."""
        store = FakeObjectStore()
        store.put(f"{ALBUM_ID}/previews/orphan.jpg", b"x", "image/jpeg")
        mutations_before = store.mutations()

        with pytest.raises(AlbumNotFound) as exc_info:
            AlbumDeletionService(store).delete_album(ALBUM_ID)

        assert exc_info.value.album_id == ALBUM_ID
        assert store.mutations() == mutations_before
        assert store.keys() == [f"{ALBUM_ID}/previews/orphan.jpg"]

    def test_delete_failure_propagates(self):
        """Test store delete errors abort the deletion."""
        store = FakeObjectStore()
        publish_album(store)
        store.fail_on_keys.add(f"{ALBUM_ID}/previews/i1.jpg")

        with pytest.raises(StoreWriteFailure):
            AlbumDeletionService(store).delete_album(ALBUM_ID)
