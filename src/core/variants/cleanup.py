"""Removal of resized variants before their original is overwritten."""

from aws_lambda_powertools import Logger

from core.models.errors import CleanupResizedVariantsFailedError, ImageServiceError
from core.repositories.object_store_repository import ObjectStoreRepository
from core.utils.keys import variant_prefix

logger = Logger(UTC=True)


class VariantCleanup:
    """Deletes every ``{key}_*`` variant of a storage key."""

    def __init__(self, store: ObjectStoreRepository) -> None:
        self.store = store

    def cleanup(self, key: str) -> int:
        """Delete all resized variants of ``key``.

        Must run before new content is written under ``key`` so no variant
        outlives the original it was derived from. Having nothing to delete
        is not an error.

        Args:
            key: Storage key about to be (over)written

        Returns:
            Number of variants deleted

        Raises:
            CleanupResizedVariantsFailedError: If listing or deletion fails
        """
        prefix = variant_prefix(key)

        try:
            variant_keys = self.store.list_keys(prefix=prefix)
            if not variant_keys:
                return 0

            logger.info(
                "Cleaning up resized variants",
                extra={"key": key, "count": len(variant_keys)},
            )
            self.store.delete_objects(keys=variant_keys)

        except ImageServiceError as exc:
            logger.exception("Failed to clean up resized variants", extra={"key": key})
            raise CleanupResizedVariantsFailedError(details={"key": key}) from exc

        logger.info("Resized variants cleaned up", extra={"key": key})
        return len(variant_keys)
