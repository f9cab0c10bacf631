# src/film_gallery/core/error_handling.py

import asyncio
import functools
import logging
from typing import Any, Callable, List, Optional, Tuple, TypeVar

from botocore.exceptions import BotoCoreError, ClientError

from .exceptions import ObjectNotFound, StoreReadFailure, StoreWriteFailure

F = TypeVar("F", bound=Callable[..., Any])

NOT_FOUND_ERROR_CODES = ("404", "NoSuchKey", "NotFound")


def _key_from_call(args: Tuple[Any, ...], kwargs: dict) -> Optional[str]:
    # Store methods take the key as their first positional argument after self.
    if "key" in kwargs:
        return kwargs["key"]
    if len(args) > 1 and isinstance(args[1], str):
        return args[1]
    return None


def _translate(exc: Exception, func_name: str, key: Optional[str], write: bool) -> Exception:
    if isinstance(exc, ClientError):
        error_code = exc.response.get("Error", {}).get("Code", "")
        if error_code in NOT_FOUND_ERROR_CODES:
            return ObjectNotFound(f"Object not found: {key}", key=key)
    failure_cls = StoreWriteFailure if write else StoreReadFailure
    return failure_cls(f"S3 operation '{func_name}' failed for key {key!r}: {exc}", key=key)


def with_store_error_handling(write: bool = False) -> Callable[[F], F]:
    """
    Decorator translating botocore errors raised by object store methods.

    Works on both plain and ``async def`` methods. A 404 / NoSuchKey response
    becomes ``ObjectNotFound``; every other client or transport error becomes
    ``StoreWriteFailure`` when ``write`` is set, ``StoreReadFailure`` otherwise.
    """

    def decorator(func: F) -> F:
        logger = logging.getLogger("film-gallery.store")

        if asyncio.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                try:
                    return await func(*args, **kwargs)
                except (ClientError, BotoCoreError) as e:
                    key = _key_from_call(args, kwargs)
                    translated = _translate(e, func.__name__, key, write)
                    if not isinstance(translated, ObjectNotFound):
                        logger.error(f"Error in '{func.__name__}': {e}")
                    raise translated from e

            return async_wrapper  # type: ignore[return-value]

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except (ClientError, BotoCoreError) as e:
                key = _key_from_call(args, kwargs)
                translated = _translate(e, func.__name__, key, write)
                if not isinstance(translated, ObjectNotFound):
                    logger.error(f"Error in '{func.__name__}': {e}")
                raise translated from e

        return wrapper  # type: ignore[return-value]

    return decorator


class StageErrorCollector:
    """
    Context manager for a pipeline stage that drains every work item before failing.

    Items report failures through ``add_error``; the first one reported is
    re-raised when the block exits, after a summary of all of them is logged.
    """

    def __init__(self, operation_name: str = "Stage"):
        self.operation_name = operation_name
        self.errors: List[Tuple[str, BaseException]] = []
        self.logger = logging.getLogger("film-gallery.stage")

    def __enter__(self) -> "StageErrorCollector":
        self.logger.debug(f"Starting {self.operation_name}.")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type:
            self.logger.error(
                f"{self.operation_name} failed due to an unhandled exception: {exc_val}"
            )
            return False

        if self.errors:
            self.logger.error(
                f"{self.operation_name} failed with {len(self.errors)} error(s)."
            )
            for i, (item, error) in enumerate(self.errors):
                self.logger.error(
                    f"  Error {i + 1}/{len(self.errors)} for item '{item}': {error}"
                )
            raise self.errors[0][1]

        self.logger.debug(f"{self.operation_name} completed successfully.")
        return False

    @property
    def failed(self) -> bool:
        return bool(self.errors)

    def add_error(self, error: BaseException, item_identifier: str = "Unknown item") -> None:
        """Record a failure for one work item. The first one recorded wins."""
        self.errors.append((item_identifier, error))
        self.logger.debug(
            f"Error added for item '{item_identifier}' in {self.operation_name}: {error}"
        )
