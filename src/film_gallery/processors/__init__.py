"""Pipeline stages: thread-pool processing and asyncio upload."""

from .multithread import process_batch as multithread_process_batch
from .asyncio_processor import process_batch as asyncio_upload_batch

__all__ = [
    "multithread_process_batch",
    "asyncio_upload_batch",
]
