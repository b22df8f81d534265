"""
Pytest configuration and fixtures for image-resize-service tests.
Provides AWS mocking, S3 fixtures with proper cleanup, an in-memory object
store and sample images.
"""

import os
import threading
from collections.abc import Callable, Sequence
from io import BytesIO
from typing import Any

os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("AWS_SECURITY_TOKEN", "testing")
os.environ.setdefault("AWS_SESSION_TOKEN", "testing")
os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("IMAGE_S3_BUCKET_NAME", "image-resize-test-bucket")
os.environ.setdefault("IMAGE_KEY_ENCRYPTION_SECRET", "test-encryption-key-123")
os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "1")
os.environ.setdefault("POWERTOOLS_METRICS_NAMESPACE", "ImageResizeServiceTests")
os.environ.setdefault("POWERTOOLS_SERVICE_NAME", "image-resize-service")

import boto3
import pytest
from botocore.exceptions import ClientError
from moto import mock_aws
from PIL import Image

from core.bootstrap import Runtime, build_runtime, get_runtime
from core.models.errors import NotFoundError, StorageError
from core.models.image import ImageObject
from core.repositories.object_store_repository import ObjectStoreRepository
from core.security.key_codec import KeyCodec

TEST_SECRET = "test-encryption-key-123"


@pytest.fixture(autouse=True)
def reset_runtime_cache():
    get_runtime.cache_clear()
    yield
    get_runtime.cache_clear()


@pytest.fixture(scope="function")
def aws_mock():
    with mock_aws():
        yield


@pytest.fixture(scope="function")
def s3_client(aws_mock):
    """S3 client for bucket operations."""
    return boto3.client("s3", region_name=os.getenv("AWS_REGION"))


def _cleanup_s3_objects(s3_client, bucket_name):
    """Helper to delete all objects from S3 bucket efficiently."""
    try:
        paginator = s3_client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=bucket_name):
            objects = page.get("Contents", [])
            if objects:
                delete_keys = [{"Key": obj["Key"]} for obj in objects]
                s3_client.delete_objects(
                    Bucket=bucket_name, Delete={"Objects": delete_keys}
                )
    except ClientError as e:
        if e.response["Error"]["Code"] != "NoSuchBucket":
            raise


@pytest.fixture(scope="function")
def s3_bucket(s3_client):
    """
    Create and manage S3 bucket for testing.

    Cleanup Strategy:
    - Objects are deleted after each test (teardown)
    - Bucket is NOT deleted (moto cleans up on context exit)
    """
    bucket_name = os.getenv("IMAGE_S3_BUCKET_NAME")

    try:
        s3_client.head_bucket(Bucket=bucket_name)
    except ClientError:
        s3_client.create_bucket(Bucket=bucket_name)

    yield s3_client

    _cleanup_s3_objects(s3_client, bucket_name)


@pytest.fixture
def s3_put_object(s3_client) -> Callable[..., dict[str, Any]]:
    """
    Helper to upload an object to S3.

    Usage:
        s3_put_object("dogs/1-abc", image_bytes, "image/png")
    """

    def _put(key: str, body: bytes, content_type: str = "application/octet-stream"):
        bucket_name = os.getenv("IMAGE_S3_BUCKET_NAME")
        return s3_client.put_object(
            Bucket=bucket_name, Key=key, Body=body, ContentType=content_type
        )

    return _put


@pytest.fixture
def s3_get_object(s3_client) -> Callable[[str], bytes]:
    """Helper to get an object's bytes from S3."""

    def _get(key: str) -> bytes:
        bucket_name = os.getenv("IMAGE_S3_BUCKET_NAME")
        response: dict[str, Any] = s3_client.get_object(Bucket=bucket_name, Key=key)
        data: bytes = response["Body"].read()
        return data

    return _get


@pytest.fixture
def s3_list_keys(s3_client) -> Callable[[], list[str]]:
    """Helper to list every key in the test bucket."""

    def _list() -> list[str]:
        bucket_name = os.getenv("IMAGE_S3_BUCKET_NAME")
        response = s3_client.list_objects_v2(Bucket=bucket_name)
        return sorted(obj["Key"] for obj in response.get("Contents", []))

    return _list


class InMemoryObjectStore(ObjectStoreRepository):
    """Dict-backed object store that records every call.

    Uploads store files from worker threads, so access is serialized.
    """

    def __init__(self) -> None:
        self.objects: dict[str, ImageObject] = {}
        self.put_calls: list[str] = []
        self.get_calls: list[str] = []
        self.batch_delete_calls: list[list[str]] = []
        self.get_error: Exception | None = None
        self.put_error: Exception | None = None
        self.list_error: Exception | None = None
        self._lock = threading.Lock()

    def put_object(self, *, key: str, data: bytes, content_type: str) -> None:
        if self.put_error:
            raise self.put_error
        with self._lock:
            self.put_calls.append(key)
            self.objects[key] = ImageObject(data=data, content_type=content_type)

    def get_object(self, *, key: str) -> ImageObject:
        with self._lock:
            self.get_calls.append(key)
            if self.get_error:
                raise self.get_error
            if key not in self.objects:
                raise NotFoundError(details={"key": key})
            return self.objects[key]

    def list_keys(self, *, prefix: str) -> list[str]:
        if self.list_error:
            raise self.list_error
        with self._lock:
            return sorted(key for key in self.objects if key.startswith(prefix))

    def delete_object(self, *, key: str) -> None:
        with self._lock:
            self.objects.pop(key, None)

    def delete_objects(self, *, keys: Sequence[str]) -> None:
        self.batch_delete_calls.append(list(keys))
        for key in keys:
            self.delete_object(key=key)


@pytest.fixture
def memory_store() -> InMemoryObjectStore:
    return InMemoryObjectStore()


@pytest.fixture
def failing_storage_error() -> StorageError:
    return StorageError(message="Unable to fetch object at this time")


@pytest.fixture(scope="session")
def key_codec() -> KeyCodec:
    return KeyCodec(TEST_SECRET)


@pytest.fixture
def runtime(memory_store, key_codec) -> Runtime:
    return build_runtime(store=memory_store, codec=key_codec)


@pytest.fixture
def make_image() -> Callable[..., bytes]:
    """
    Factory for encoded test images.

    Usage:
        png = make_image(200, 150)
        jpeg = make_image(40, 30, image_format="JPEG")
    """

    def _make(
        width: int,
        height: int,
        *,
        image_format: str = "PNG",
        color: tuple[int, int, int] = (200, 30, 30),
    ) -> bytes:
        img = Image.new("RGB", (width, height), color)
        with BytesIO() as buffer:
            img.save(buffer, format=image_format)
            return buffer.getvalue()

    return _make


@pytest.fixture
def sample_png_binary(make_image) -> bytes:
    """A 200x150 PNG."""
    return make_image(200, 150)


@pytest.fixture
def image_size() -> Callable[[bytes], tuple[int, int]]:
    """Helper returning (width, height) of encoded image bytes."""

    def _size(data: bytes) -> tuple[int, int]:
        with Image.open(BytesIO(data)) as img:
            return img.size

    return _size
