"""Unit tests for the in-memory store fakes."""

import asyncio
import io

import pytest
from PIL import Image

from film_gallery.core.exceptions import ObjectNotFound, StoreReadFailure, StoreWriteFailure
from film_gallery.testing.fakes import (
    FakeAsyncObjectStore,
    FakeObjectStore,
    create_test_image,
    setup_test_album_dir,
)


class TestFakeObjectStore:
    """Tests for FakeObjectStore."""

    def test_put_and_get(self):
        """Test basic put and get operations."""
        store = FakeObjectStore()
        store.put("a/b.jpg", b"data", "image/jpeg")

        assert store.get("a/b.jpg") == b"data"
        assert store.objects["a/b.jpg"].content_type == "image/jpeg"
        assert store.exists("a/b.jpg")

    def test_get_missing(self):
        """Test that missing keys raise ObjectNotFound."""
        with pytest.raises(ObjectNotFound):
            FakeObjectStore().get("missing")

    def test_list_and_delete(self):
        """Test prefix listing and deletion."""
        store = FakeObjectStore()
        for key in ["a/2", "a/1", "b/1"]:
            store.put(key, b"", "text/plain")

        assert store.list_with_prefix("a/") == ["a/1", "a/2"]
        store.delete("a/1")
        assert store.keys() == ["a/2", "b/1"]

    def test_failure_mode(self):
        """Test configured failures by operation kind."""
        store = FakeObjectStore()
        store.set_failure_mode(True, "down")

        with pytest.raises(StoreWriteFailure, match="down"):
            store.put("k", b"", "text/plain")
        with pytest.raises(StoreReadFailure):
            store.get("k")

    def test_fail_on_specific_keys(self):
        store = FakeObjectStore()
        store.fail_on_keys.add("bad")
        store.put("good", b"", "text/plain")
        with pytest.raises(StoreWriteFailure):
            store.put("bad", b"", "text/plain")

    def test_operation_log(self):
        """Test operations are recorded in order."""
        store = FakeObjectStore()
        store.put("k", b"", "text/plain")
        store.get("k")
        store.delete("k")

        assert store.operations == [("put", "k"), ("get", "k"), ("delete", "k")]
        assert store.count("put") == 1
        assert store.mutations() == [("put", "k"), ("delete", "k")]


class TestFakeAsyncObjectStore:
    """Tests for FakeAsyncObjectStore."""

    def test_writes_through_to_backend(self):
        """Test async puts land in the shared backend."""
        backend = FakeObjectStore()
        store = FakeAsyncObjectStore(backend)

        async def run():
            async with store as opened:
                await opened.put("k", b"v", "text/plain")
                await opened.delete("k")
                await opened.put("k2", b"v2", "text/plain")

        asyncio.run(run())

        assert store.opened and store.closed
        assert backend.keys() == ["k2"]

    def test_tracks_max_in_flight(self):
        """Test in-flight accounting across concurrent puts."""
        store = FakeAsyncObjectStore(FakeObjectStore(), delay_seconds=0.01)

        async def run():
            await asyncio.gather(*(store.put(f"k{i}", b"", "text/plain") for i in range(5)))

        asyncio.run(run())
        assert store.max_in_flight == 5
        assert store.in_flight == 0


class TestHelpers:
    """Tests for test image helpers."""

    def test_create_test_image(self):
        """Test that generated images decode with the requested size."""
        image = Image.open(io.BytesIO(create_test_image(64, 32, format="PNG")))
        assert image.format == "PNG"
        assert image.size == (64, 32)

    def test_different_colors_differ(self):
        assert create_test_image(color="red") != create_test_image(color="green")

    def test_setup_test_album_dir(self, tmp_path):
        """Test the sample album directory layout."""
        paths = setup_test_album_dir(tmp_path)
        assert [p.name for p in paths] == ["a.jpg", "b.jpg", "c.png"]
        assert all(p.exists() for p in paths)
        assert (tmp_path / "notes.txt").exists()
