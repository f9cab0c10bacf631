"""Factory classes for creating per-run object store handles."""

from typing import Any, Dict, Optional

import aioboto3
import boto3
from botocore.config import Config as BotoConfig

from .models import GalleryConfig
from .storage import AsyncS3ObjectStore, S3ObjectStore


def s3_client_kwargs(
    endpoint_url: Optional[str] = None, region_name: Optional[str] = None
) -> Dict[str, Any]:
    """Client keyword arguments shared by the boto3 and aioboto3 clients.

    Custom endpoints (MinIO, LocalStack, ...) need path-style addressing.
    """
    kwargs: Dict[str, Any] = {}
    if region_name:
        kwargs["region_name"] = region_name
    if endpoint_url:
        kwargs["endpoint_url"] = endpoint_url
        kwargs["config"] = BotoConfig(s3={"addressing_style": "path"})
    return kwargs


class S3ClientFactory:
    """Factory for creating S3 client instances."""

    @staticmethod
    def create_s3_client(
        endpoint_url: Optional[str] = None, region_name: Optional[str] = None
    ) -> Any:
        """Create a boto3 S3 client from a fresh session."""
        session = boto3.Session()
        return session.client("s3", **s3_client_kwargs(endpoint_url, region_name))  # type: ignore


class ObjectStoreFactory:
    """Factory for the object store handles used during one run."""

    @staticmethod
    def create_store(config: GalleryConfig) -> S3ObjectStore:
        client = S3ClientFactory.create_s3_client(config.endpoint_url, config.region_name)
        return S3ObjectStore(client, config.bucket)

    @staticmethod
    def create_async_store(config: GalleryConfig) -> AsyncS3ObjectStore:
        """Create an unopened async store; enter it with ``async with``."""
        return AsyncS3ObjectStore(
            config.bucket,
            session=aioboto3.Session(),
            client_kwargs=s3_client_kwargs(config.endpoint_url, config.region_name),
        )
