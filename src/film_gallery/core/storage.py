"""S3-backed object stores (boto3 for blocking calls, aioboto3 for the upload stage)."""

from typing import Any, List, Optional

import aioboto3
from botocore.exceptions import ClientError

from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from mypy_boto3_s3.client import S3Client
else:
    S3Client = Any

from .error_handling import NOT_FOUND_ERROR_CODES, with_store_error_handling
from .logging_config import get_logger


class S3ObjectStore:
    """Blocking object store over a single S3 bucket."""

    def __init__(self, client: S3Client, bucket: str):
        self._client = client
        self.bucket = bucket
        self._logger = get_logger("store")

    @with_store_error_handling(write=True)
    def put(self, key: str, data: bytes, content_type: str) -> None:
        self._logger.debug(f"S3 PUT: bucket={self.bucket}, key={key}, size={len(data)} bytes")
        self._client.put_object(
            Bucket=self.bucket, Key=key, Body=data, ContentType=content_type
        )

    @with_store_error_handling()
    def get(self, key: str) -> bytes:
        self._logger.debug(f"S3 GET: bucket={self.bucket}, key={key}")
        response = self._client.get_object(Bucket=self.bucket, Key=key)
        return response["Body"].read()

    @with_store_error_handling()
    def exists(self, key: str) -> bool:
        try:
            self._client.head_object(Bucket=self.bucket, Key=key)
            return True
        except ClientError as e:
            if e.response["Error"]["Code"] in NOT_FOUND_ERROR_CODES:
                return False
            raise

    @with_store_error_handling()
    def list_with_prefix(self, prefix: str) -> List[str]:
        keys = []
        paginator = self._client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=self.bucket, Prefix=prefix):
            for obj in page.get("Contents", []):
                keys.append(obj["Key"])
        self._logger.debug(f"Found {len(keys)} objects under s3://{self.bucket}/{prefix}")
        return keys

    @with_store_error_handling(write=True)
    def delete(self, key: str) -> None:
        self._logger.debug(f"S3 DELETE: bucket={self.bucket}, key={key}")
        self._client.delete_object(Bucket=self.bucket, Key=key)

    @with_store_error_handling()
    def presign(self, key: str, ttl: int) -> str:
        return self._client.generate_presigned_url(
            "get_object",
            Params={"Bucket": self.bucket, "Key": key},
            ExpiresIn=ttl,
        )


class AsyncS3ObjectStore:
    """
    Async object store over a single S3 bucket.

    One aioboto3 client is opened on ``__aenter__`` and shared by every
    upload task for connection reuse; it is closed on ``__aexit__``.
    """

    def __init__(
        self,
        bucket: str,
        session: Optional[aioboto3.Session] = None,
        client_kwargs: Optional[dict] = None,
    ):
        self.bucket = bucket
        self._session = session or aioboto3.Session()
        self._client_kwargs = client_kwargs or {}
        self._client_cm: Any = None
        self._client: Any = None
        self._logger = get_logger("store")

    async def __aenter__(self) -> "AsyncS3ObjectStore":
        self._client_cm = self._session.client("s3", **self._client_kwargs)  # type: ignore[reportUnknownMemberType]
        self._client = await self._client_cm.__aenter__()
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        if self._client_cm is not None:
            await self._client_cm.__aexit__(exc_type, exc, tb)
        self._client_cm = None
        self._client = None

    @with_store_error_handling(write=True)
    async def put(self, key: str, data: bytes, content_type: str) -> None:
        self._logger.debug(f"S3 PUT (async): bucket={self.bucket}, key={key}, size={len(data)} bytes")
        await self._client.put_object(
            Bucket=self.bucket, Key=key, Body=data, ContentType=content_type
        )

    @with_store_error_handling(write=True)
    async def delete(self, key: str) -> None:
        self._logger.debug(f"S3 DELETE (async): bucket={self.bucket}, key={key}")
        await self._client.delete_object(Bucket=self.bucket, Key=key)
