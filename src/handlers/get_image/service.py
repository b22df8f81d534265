"""
Business logic for image retrieval.

This module resolves the requested storage key (from an encrypted
reference or a plain path), fetches the original and, when a size is
requested, serves the cached or freshly resized variant.
"""

from aws_lambda_powertools import Logger

from core.bootstrap import Runtime
from core.models.errors import KeyRequiredError
from core.models.image import ImageObject
from core.utils.keys import storage_key_from_path
from core.utils.size import parse_size

logger = Logger(UTC=True)


class GetService:
    """Application service responsible for serving images.

    This service orchestrates:
    - Decoding encrypted references into storage keys
    - Fetching the original image
    - Delegating resizing to the resize cache
    """

    def __init__(self, runtime: Runtime) -> None:
        self.store = runtime.store
        self.codec = runtime.codec
        self.resize_cache = runtime.resize_cache

    def resolve_key(self, *, token: str | None, path: str | None) -> str:
        """Turn the request's addressing parameters into a storage key.

        Raises:
            KeyRequiredError: If neither a token nor a path is given
            DecryptionError: If the token is invalid
            PrefixRequiredError, InvalidPrefixFormatError, InvalidKeyError:
                If the plain path is malformed
        """
        if token:
            return self.codec.decrypt(token)

        if path:
            return storage_key_from_path(path)

        raise KeyRequiredError()

    def get_image(
        self,
        *,
        token: str | None = None,
        path: str | None = None,
        size: str | None = None,
    ) -> ImageObject:
        """Return the original image or its ``size`` variant.

        Raises:
            NotFoundError: If the original does not exist
            InvalidSizeParameterError: If ``size`` is malformed or out of bounds
            StorageError: If the store fails
        """
        key = self.resolve_key(token=token, path=path)

        # Always fetch the original so a missing image is reported even
        # when a stale variant is still cached
        original = self.store.get_object(key=key)

        if not size:
            logger.debug("Serving original image", extra={"size": len(original.data)})
            return original

        size_spec = parse_size(size)
        return self.resize_cache.get_or_create(original, key, size_spec)
