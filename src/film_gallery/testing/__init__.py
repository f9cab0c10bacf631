"""Testing utilities and fakes for film-gallery."""

from .fakes import (
    FakeObjectStore,
    FakeAsyncObjectStore,
    StoredObject,
    create_test_image,
    write_test_image,
    setup_test_album_dir,
)

__all__ = [
    "FakeObjectStore",
    "FakeAsyncObjectStore",
    "StoredObject",
    "create_test_image",
    "write_test_image",
    "setup_test_album_dir",
]
