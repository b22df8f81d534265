"""S3-backed implementation of ObjectStoreRepository."""

from collections.abc import Sequence

from aws_lambda_powertools import Logger
from botocore.exceptions import BotoCoreError, ClientError

from core.infrastructure.adapters.s3_adapter import S3Adapter, S3AdapterProtocol
from core.models.errors import NotFoundError, StorageError
from core.models.image import ImageObject
from core.repositories.object_store_repository import ObjectStoreRepository
from core.utils.constants import DEFAULT_IMAGE_CONTENT_TYPE

logger = Logger(UTC=True)

NOT_FOUND_ERROR_CODES = frozenset({"NoSuchKey", "404", "NotFound"})

# S3 DeleteObjects accepts at most 1000 keys per request
DELETE_BATCH_LIMIT = 1000


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))


class S3ObjectStore(ObjectStoreRepository):
    """Object store implementation backed by Amazon S3 (or S3-compatible)."""

    def __init__(self, adapter: S3AdapterProtocol | None = None) -> None:
        """Create storage using the provided S3 adapter."""
        self._s3 = adapter or S3Adapter()

    def put_object(self, *, key: str, data: bytes, content_type: str) -> None:
        """Write object bytes to S3."""
        logger.debug(
            "Storing object",
            extra={"key": key, "size": len(data), "content_type": content_type},
        )

        try:
            self._s3.put_object(key=key, body=data, content_type=content_type)

        except (ClientError, BotoCoreError) as exc:
            logger.error("S3 upload failed", extra={"key": key})
            raise StorageError(
                message="Unable to store object at this time",
                details={"key": key},
            ) from exc

        logger.info("Object stored successfully", extra={"key": key})

    def get_object(self, *, key: str) -> ImageObject:
        """Read object bytes and content type from S3."""
        logger.debug("Fetching object", extra={"key": key})

        try:
            response = self._s3.get_object(key=key)
            body = response["Body"].read()

        except ClientError as exc:
            if _error_code(exc) in NOT_FOUND_ERROR_CODES:
                raise NotFoundError(details={"key": key}) from exc

            logger.error("S3 download failed", extra={"key": key})
            raise StorageError(
                message="Unable to fetch object at this time",
                details={"key": key},
            ) from exc

        except BotoCoreError as exc:
            logger.error("S3 download failed", extra={"key": key})
            raise StorageError(
                message="Unable to fetch object at this time",
                details={"key": key},
            ) from exc

        content_type = response.get("ContentType") or DEFAULT_IMAGE_CONTENT_TYPE
        return ImageObject(data=body, content_type=content_type)

    def list_keys(self, *, prefix: str) -> list[str]:
        """List all keys under a prefix, following pagination."""
        try:
            return list(self._s3.iter_keys(prefix=prefix))

        except (ClientError, BotoCoreError) as exc:
            logger.error("S3 listing failed", extra={"prefix": prefix})
            raise StorageError(
                message="Unable to list objects at this time",
                details={"prefix": prefix},
            ) from exc

    def delete_object(self, *, key: str) -> None:
        """Delete a single object from S3."""
        try:
            self._s3.delete_object(key=key)

        except (ClientError, BotoCoreError) as exc:
            logger.error("S3 deletion failed", extra={"key": key})
            raise StorageError(
                message="Unable to delete object at this time",
                details={"key": key},
            ) from exc

        logger.debug("Object deleted", extra={"key": key})

    def delete_objects(self, *, keys: Sequence[str]) -> None:
        """Delete objects in batches, falling back to single deletes.

        Some S3-compatible backends (MinIO among them) reject DeleteObjects
        requests that lack a Content-MD5 header. When a batch is rejected,
        or the backend reports per-key errors, the affected keys are
        deleted one at a time.
        """
        for start in range(0, len(keys), DELETE_BATCH_LIMIT):
            batch = list(keys[start : start + DELETE_BATCH_LIMIT])

            try:
                response = self._s3.delete_objects(keys=batch)
                failed = [err["Key"] for err in response.get("Errors", []) if err.get("Key")]

            except (ClientError, BotoCoreError) as exc:
                logger.warning(
                    "Batch delete rejected, falling back to single deletes",
                    extra={"count": len(batch), "error": str(exc)},
                )
                failed = batch

            for key in failed:
                self.delete_object(key=key)

        logger.info("Objects deleted", extra={"count": len(keys)})
