"""Protocol definitions for dependency injection and testability."""

from typing import Any, List, Protocol


class ObjectStoreProtocol(Protocol):
    """Blocking object store operations over one bucket's key namespace."""

    def put(self, key: str, data: bytes, content_type: str) -> None:
        """Write an object, replacing any existing one."""
        ...

    def get(self, key: str) -> bytes:
        """Read an object. Raises ObjectNotFound if absent."""
        ...

    def exists(self, key: str) -> bool:
        """Check whether an object exists."""
        ...

    def list_with_prefix(self, prefix: str) -> List[str]:
        """List every key starting with prefix."""
        ...

    def delete(self, key: str) -> None:
        """Delete an object."""
        ...

    def presign(self, key: str, ttl: int) -> str:
        """Return a time-limited download URL for an object."""
        ...


class AsyncObjectStoreProtocol(Protocol):
    """Async object store used by the upload stage, scoped by ``async with``."""

    async def __aenter__(self) -> "AsyncObjectStoreProtocol":
        ...

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        ...

    async def put(self, key: str, data: bytes, content_type: str) -> None:
        """Write an object, replacing any existing one."""
        ...

    async def delete(self, key: str) -> None:
        """Delete an object."""
        ...
