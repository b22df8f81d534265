"""Business logic for image upload operations.

This module validates a batch of uploaded files, stores each one under a
fresh storage key (after clearing any resized variants of that key),
extracts embedded metadata and hands back an encrypted reference to each
stored key. A batch either succeeds for every file or
fails as a whole.
"""

import base64
import binascii
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from functools import partial

from aws_lambda_powertools import Logger

from core.bootstrap import Runtime
from core.models.errors import (
    EmptyImageProvidedError,
    InvalidImageError,
    NoFileProvidedError,
    UnsupportedImageFormatError,
    ValidationError,
)
from core.models.image import UploadedImage
from core.utils.constants import (
    ERROR_CODE_FILE_SIZE_EXCEEDED,
    IMAGE_CONTENT_TYPE_PREFIX,
    MAX_FILE_SIZE,
    MAX_UPLOAD_WORKERS,
    get_max_file_size_mb,
)
from core.utils.keys import generate_storage_key, validate_prefix
from core.utils.mime import detect_mime_type

from .models import UploadFile

logger = Logger(UTC=True)


@dataclass(frozen=True)
class PreparedFile:
    """An upload file that passed validation and is ready to store."""

    name: str
    data: bytes
    content_type: str


class UploadService:
    """Application service responsible for image uploads.

    This service orchestrates:
    - File decoding and validation (for the whole batch, before any write)
    - Cleanup of resized variants of the target key
    - Storing the original
    - Extracting embedded image metadata
    - Rolling back stored originals if any file in the batch fails
    """

    def __init__(self, runtime: Runtime) -> None:
        """Initialize the upload service with required infrastructure dependencies."""
        self.store = runtime.store
        self.processor = runtime.processor
        self.variant_cleanup = runtime.variant_cleanup
        self.codec = runtime.codec

    @staticmethod
    def decode_file(encoded: str) -> bytes:
        """Decode base64-encoded image data.

        Raises:
            InvalidImageError: If decoding fails
        """
        try:
            return base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as exc:
            logger.warning("Failed to decode base64 image data")
            raise InvalidImageError(details={"encoding": "base64"}) from exc

    def prepare_file(self, upload: UploadFile) -> PreparedFile:
        """Validate one file without touching the store.

        Raises:
            InvalidImageError: If the data is not valid base64 or not an image
            EmptyImageProvidedError: If the decoded file is empty
            ValidationError: If the file exceeds the size limit
            UnsupportedImageFormatError: If the content type is not ``image/*``
        """
        data = self.decode_file(upload.file)

        if not data:
            raise EmptyImageProvidedError(details={"file_name": upload.file_name})

        if len(data) > MAX_FILE_SIZE:
            raise ValidationError(
                message=f"File size exceeds {get_max_file_size_mb()}MB limit",
                error_code=ERROR_CODE_FILE_SIZE_EXCEEDED,
                details={"file_name": upload.file_name},
            )

        content_type = upload.content_type or detect_mime_type(data)
        if not content_type or not content_type.lower().startswith(IMAGE_CONTENT_TYPE_PREFIX):
            logger.warning(
                "Unsupported content type",
                extra={"file_name": upload.file_name, "content_type": content_type},
            )
            raise UnsupportedImageFormatError(
                details={"file_name": upload.file_name, "content_type": content_type},
            )

        self.processor.inspect(data)

        return PreparedFile(name=upload.file_name, data=data, content_type=content_type)

    def _store_file(
        self,
        prepared: PreparedFile,
        *,
        prefix: str,
        stored_keys: list[str],
    ) -> UploadedImage:
        key = generate_storage_key(prefix)

        self.variant_cleanup.cleanup(key)

        self.store.put_object(key=key, data=prepared.data, content_type=prepared.content_type)
        stored_keys.append(key)

        return UploadedImage(
            key=self.codec.encrypt(key),
            original_name=prepared.name,
            content_type=prepared.content_type,
            size=len(prepared.data),
            metadata=self.processor.extract_metadata(prepared.data),
        )

    def _rollback(self, keys: Sequence[str]) -> None:
        for key in keys:
            # Best-effort cleanup; the original failure is what the caller sees
            try:
                self.store.delete_object(key=key)
            except Exception:
                logger.warning("Failed to roll back stored image", extra={"key": key})

    def upload_images(
        self,
        *,
        prefix: str | None,
        files: Sequence[UploadFile],
    ) -> list[UploadedImage]:
        """Store a batch of images under ``prefix``.

        The upload flow is:
        1. Validate the prefix and every file (no writes yet)
        2. Run one pipeline per file concurrently:
           generate key -> clean up variants -> store -> extract metadata
        3. If any pipeline fails, delete the originals already stored

        Args:
            prefix: Storage prefix from the request path
            files: Files from the request body

        Returns:
            One record per stored file, in request order

        Raises:
            PrefixRequiredError, InvalidPrefixFormatError: Bad prefix
            NoFileProvidedError: If ``files`` is empty
            ImageServiceError: The first failure of any file in the batch
        """
        prefix = validate_prefix(prefix)

        if not files:
            raise NoFileProvidedError()

        prepared = [self.prepare_file(upload) for upload in files]

        logger.debug("Storing upload batch", extra={"prefix": prefix, "count": len(prepared)})

        stored_keys: list[str] = []
        store_file = partial(self._store_file, prefix=prefix, stored_keys=stored_keys)

        try:
            with ThreadPoolExecutor(max_workers=min(MAX_UPLOAD_WORKERS, len(prepared))) as executor:
                results = list(executor.map(store_file, prepared))
        except Exception:
            logger.exception(
                "Upload batch failed, rolling back stored images",
                extra={"prefix": prefix, "stored": len(stored_keys)},
            )
            self._rollback(stored_keys)
            raise

        logger.info(
            "Images uploaded successfully",
            extra={"prefix": prefix, "count": len(results)},
        )
        return results
