"""Read-through cache of resized image variants stored next to originals."""

from aws_lambda_powertools import Logger

from core.imaging.processor import ImageProcessor
from core.models.errors import NotFoundError
from core.models.image import ImageObject
from core.models.size import SizeSpec
from core.repositories.object_store_repository import ObjectStoreRepository
from core.utils.keys import build_variant_key

logger = Logger(UTC=True)


class ResizeCacheManager:
    """Returns a cached resized variant, or computes and stores it.

    Variants live in the same store as originals under
    ``{key}_{width}x{height}``. A stored variant is trusted as-is; keeping
    variants in step with their original is the job of
    :class:`core.variants.cleanup.VariantCleanup` on the upload path.

    Concurrent misses for the same variant each compute and write it; the
    writes are identical, so the last one wins harmlessly.
    """

    def __init__(
        self,
        store: ObjectStoreRepository,
        processor: ImageProcessor | None = None,
    ) -> None:
        self.store = store
        self.processor = processor or ImageProcessor()

    def get_or_create(
        self,
        original: ImageObject,
        key: str,
        size: SizeSpec,
    ) -> ImageObject:
        """Get the ``size`` variant of ``key``, creating it on a cache miss.

        Only a missing variant counts as a miss. Any other store failure is
        raised so an outage is not mistaken for an empty cache.

        Args:
            original: The original image, already fetched by the caller
            key: Storage key of the original
            size: Requested bounding box

        Returns:
            The cached or newly created variant

        Raises:
            InvalidImageError: If the original cannot be decoded on a miss
            StorageError: If the store fails on read or write
        """
        variant_key = build_variant_key(key, size)

        try:
            cached = self.store.get_object(key=variant_key)
        except NotFoundError:
            logger.info("Resize cache miss", extra={"variant_key": variant_key})
        else:
            logger.info("Resize cache hit", extra={"variant_key": variant_key})
            return cached

        resized = ImageObject(
            data=self.processor.resize_to_fit(original.data, size),
            content_type=original.content_type,
        )

        self.store.put_object(
            key=variant_key,
            data=resized.data,
            content_type=resized.content_type,
        )

        logger.info(
            "Resized variant stored",
            extra={"variant_key": variant_key, "size": len(resized.data)},
        )
        return resized
