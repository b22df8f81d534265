"""Abstract contract for the backing object store."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from core.models.image import ImageObject


class ObjectStoreRepository(ABC):
    """Contract for reading, writing, listing and deleting stored objects.

    Implementations could be S3, MinIO, R2, local disk, etc.
    Core components depend on this interface, not the implementation.

    Implementations must offer read-after-write consistency for a single
    key: a ``put_object`` followed by ``get_object`` for the same key
    observes the written bytes.
    """

    @abstractmethod
    def put_object(self, *, key: str, data: bytes, content_type: str) -> None:
        """Create or overwrite an object.

        Args:
            key: Object key
            data: Object bytes
            content_type: MIME type stored with the object

        Raises:
            StorageError: If the write fails
        """

    @abstractmethod
    def get_object(self, *, key: str) -> ImageObject:
        """Fetch an object with its content type.

        Args:
            key: Object key

        Returns:
            Object bytes and content type

        Raises:
            NotFoundError: If no object exists under ``key``
            StorageError: If retrieval fails for any other reason
        """

    @abstractmethod
    def list_keys(self, *, prefix: str) -> list[str]:
        """List every key starting with ``prefix``.

        Raises:
            StorageError: If listing fails
        """

    @abstractmethod
    def delete_object(self, *, key: str) -> None:
        """Delete a single object. Deleting a missing key is not an error.

        Raises:
            StorageError: If deletion fails
        """

    @abstractmethod
    def delete_objects(self, *, keys: Sequence[str]) -> None:
        """Delete several objects, preferably in one batch request.

        Implementations fall back to per-key deletes when the batch request
        is rejected by the backend.

        Raises:
            StorageError: If the objects could not be deleted
        """
