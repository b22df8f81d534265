"""Process-wide runtime built once per Lambda cold start.

Handlers call :func:`get_runtime` and pass the pieces they need into their
services explicitly. Building the runtime fails fast (and with it the
cold start) when the codec secret or bucket are missing, or when the
health-check image can neither be found nor created.
"""

from dataclasses import dataclass
from functools import lru_cache
import os

from aws_lambda_powertools import Logger

from core.imaging.processor import ImageProcessor
from core.infrastructure.aws.s3_object_store import S3ObjectStore
from core.models.errors import HealthCheckImageCreationFailedError, ImageServiceError, NotFoundError
from core.repositories.object_store_repository import ObjectStoreRepository
from core.security.key_codec import KeyCodec
from core.utils.constants import (
    DEFAULT_HEALTH_CHECK_IMAGE_KEY,
    ENV_HEALTH_CHECK_IMAGE_KEY,
    ENV_IMAGE_KEY_ENCRYPTION_SECRET,
)
from core.variants.cleanup import VariantCleanup
from core.variants.resize_cache import ResizeCacheManager

logger = Logger(UTC=True)


@dataclass(frozen=True)
class Runtime:
    """Immutable bundle of the shared collaborators."""

    store: ObjectStoreRepository
    codec: KeyCodec
    processor: ImageProcessor
    resize_cache: ResizeCacheManager
    variant_cleanup: VariantCleanup
    health_check_key: str


def build_runtime(
    *,
    store: ObjectStoreRepository,
    codec: KeyCodec,
    processor: ImageProcessor | None = None,
    health_check_key: str = DEFAULT_HEALTH_CHECK_IMAGE_KEY,
) -> Runtime:
    """Wire the core components around a store and codec."""
    processor = processor or ImageProcessor()
    return Runtime(
        store=store,
        codec=codec,
        processor=processor,
        resize_cache=ResizeCacheManager(store, processor),
        variant_cleanup=VariantCleanup(store),
        health_check_key=health_check_key,
    )


def ensure_health_check_image(runtime: Runtime) -> None:
    """Create the health-check image in the store if it is missing.

    Raises:
        HealthCheckImageCreationFailedError: If the image is missing and
            cannot be written
    """
    key = runtime.health_check_key

    try:
        runtime.store.get_object(key=key)
        logger.debug("Health check image exists", extra={"key": key})
        return
    except NotFoundError:
        logger.info("Health check image not found, creating", extra={"key": key})

    try:
        runtime.store.put_object(
            key=key,
            data=runtime.processor.create_health_check_image(),
            content_type="image/png",
        )
    except ImageServiceError as exc:
        logger.exception("Failed to create health check image", extra={"key": key})
        raise HealthCheckImageCreationFailedError(details={"key": key}) from exc

    logger.info("Health check image created", extra={"key": key})


@lru_cache(maxsize=1)
def get_runtime() -> Runtime:
    """Build the runtime from environment configuration (cached per process)."""
    runtime = build_runtime(
        store=S3ObjectStore(),
        codec=KeyCodec(os.getenv(ENV_IMAGE_KEY_ENCRYPTION_SECRET, "")),
        health_check_key=os.getenv(ENV_HEALTH_CHECK_IMAGE_KEY) or DEFAULT_HEALTH_CHECK_IMAGE_KEY,
    )
    ensure_health_check_image(runtime)

    logger.info("Runtime initialized")
    return runtime
