"""Thin adapter for interacting with Amazon S3 or an S3-compatible store."""

from collections.abc import Iterator, Mapping, Sequence
import os
from typing import Any, Protocol

import boto3
from botocore.config import Config

from core.utils.constants import (
    ENV_AWS_ENDPOINT_URL,
    ENV_AWS_REGION,
    ENV_IMAGE_S3_BUCKET_NAME,
    ENV_S3_FORCE_PATH_STYLE,
)


class _Boto3S3Client(Protocol):
    """Internal typing for boto3 S3 client (AWS-facing only)."""

    def put_object(
        self,
        *,
        Bucket: str,
        Key: str,
        Body: bytes,
        ContentType: str,
    ) -> Any: ...

    def get_object(
        self,
        *,
        Bucket: str,
        Key: str,
    ) -> Mapping[str, Any]: ...

    def delete_object(
        self,
        *,
        Bucket: str,
        Key: str,
    ) -> Any: ...

    def delete_objects(
        self,
        *,
        Bucket: str,
        Delete: Mapping[str, Any],
    ) -> Mapping[str, Any]: ...

    def get_paginator(self, operation_name: str) -> Any: ...


class S3AdapterProtocol(Protocol):
    """Minimal S3 adapter protocol (repository-facing)."""

    def put_object(self, *, key: str, body: bytes, content_type: str) -> None: ...

    def get_object(self, *, key: str) -> Mapping[str, Any]: ...

    def iter_keys(self, *, prefix: str) -> Iterator[str]: ...

    def delete_object(self, *, key: str) -> None: ...

    def delete_objects(self, *, keys: Sequence[str]) -> Mapping[str, Any]: ...


def _is_truthy(value: str | None) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes"}


class S3Adapter:
    """Low-level S3 operations (mechanical, no error handling).

    This adapter:
    - Wraps boto3 S3 client
    - Does NOT handle errors (lets them bubble up)
    - Domain implementations catch and translate errors
    """

    def __init__(self) -> None:
        """Create S3 client from environment configuration."""
        bucket_name = os.getenv(ENV_IMAGE_S3_BUCKET_NAME)
        if not bucket_name:
            raise RuntimeError(f"{ENV_IMAGE_S3_BUCKET_NAME} environment variable is not set")

        addressing_style = "path" if _is_truthy(os.getenv(ENV_S3_FORCE_PATH_STYLE)) else "auto"

        self._bucket = bucket_name
        self._client: _Boto3S3Client = boto3.client(
            "s3",
            endpoint_url=os.getenv(ENV_AWS_ENDPOINT_URL),
            region_name=os.getenv(ENV_AWS_REGION),
            config=Config(s3={"addressing_style": addressing_style}),
        )

    @property
    def bucket(self) -> str:
        return self._bucket

    def put_object(self, *, key: str, body: bytes, content_type: str) -> None:
        """Store object in S3.
        Raises boto3 exceptions - caught by domain implementation.
        """
        self._client.put_object(
            Bucket=self._bucket,
            Key=key,
            Body=body,
            ContentType=content_type,
        )

    def get_object(self, *, key: str) -> Mapping[str, Any]:
        """Fetch object from S3.
        Raises boto3 exceptions - caught by domain implementation.
        """
        response = self._client.get_object(
            Bucket=self._bucket,
            Key=key,
        )
        return response

    def iter_keys(self, *, prefix: str) -> Iterator[str]:
        """Yield every object key starting with ``prefix`` (all pages)."""
        paginator = self._client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=self._bucket, Prefix=prefix):
            for item in page.get("Contents", []):
                key = item.get("Key")
                if key:
                    yield key

    def delete_object(self, *, key: str) -> None:
        """Delete object from S3.
        Raises boto3 exceptions - caught by domain implementation.
        """
        self._client.delete_object(
            Bucket=self._bucket,
            Key=key,
        )

    def delete_objects(self, *, keys: Sequence[str]) -> Mapping[str, Any]:
        """Delete up to 1000 objects in one request (quiet mode)."""
        return self._client.delete_objects(
            Bucket=self._bucket,
            Delete={
                "Objects": [{"Key": key} for key in keys],
                "Quiet": True,
            },
        )
