"""Custom exception classes for the image resize service."""

from enum import Enum
from typing import Any

from core.utils.constants import (
    DECRYPTION_FAILED_MESSAGE,
    ERROR_CODE_CLEANUP_RESIZED_VARIANTS_FAILED,
    ERROR_CODE_CREATE_HEALTH_CHECK_IMAGE_FAILED,
    ERROR_CODE_DECRYPTION_FAILED,
    ERROR_CODE_EMPTY_IMAGE_PROVIDED,
    ERROR_CODE_HEALTH_CHECK_FAILED,
    ERROR_CODE_IMAGE_NOT_FOUND,
    ERROR_CODE_INVALID_IMAGE_PROVIDED,
    ERROR_CODE_INVALID_KEY,
    ERROR_CODE_INVALID_PREFIX_FORMAT,
    ERROR_CODE_INVALID_SIZE_PARAMETER,
    ERROR_CODE_KEY_REQUIRED,
    ERROR_CODE_NO_FILE_PROVIDED,
    ERROR_CODE_PREFIX_REQUIRED,
    ERROR_CODE_STORAGE,
    ERROR_CODE_UNSUPPORTED_IMAGE_FORMAT,
    ERROR_CODE_VALIDATION_FAILED,
)


class ErrorKind(str, Enum):
    """Transport-independent classification of service errors."""

    CLIENT_INPUT = "client_input"
    NOT_FOUND = "not_found"
    AUTH = "auth"
    SERVER_INTERNAL = "server_internal"


class ImageServiceError(Exception):
    """
    Base exception for all image service errors.

    All custom errors must inherit from this class.
    Callers must explicitly provide a message and error code.
    Optional contextual information can be supplied via `details`.

    The `kind` class attribute is the only thing the outer response layer
    looks at to pick a status code; core code never deals in HTTP statuses.
    """

    kind: ErrorKind = ErrorKind.SERVER_INTERNAL
    cause: str = "Unknown error"

    message: str
    error_code: str
    details: dict[str, Any]

    def __init__(
        self,
        *,
        message: str,
        error_code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}

        super().__init__(self.message)


class ValidationError(ImageServiceError):
    """Raised when request validation fails."""

    kind = ErrorKind.CLIENT_INPUT
    cause = "Validation error"

    def __init__(
        self,
        *,
        message: str = "Validation error",
        error_code: str = ERROR_CODE_VALIDATION_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class InvalidSizeParameterError(ValidationError):
    """Raised when a size descriptor fails syntax or bounds validation."""

    cause = "Invalid size parameter"

    def __init__(
        self,
        *,
        message: str = "Invalid size parameter",
        error_code: str = ERROR_CODE_INVALID_SIZE_PARAMETER,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class KeyRequiredError(ValidationError):
    """Raised when neither an encrypted reference nor a plain path is given."""

    cause = "Key is required"

    def __init__(
        self,
        *,
        message: str = "Key is required",
        error_code: str = ERROR_CODE_KEY_REQUIRED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class InvalidKeyError(ValidationError):
    """Raised when a plain storage path does not name an object."""

    cause = "Invalid key"

    def __init__(
        self,
        *,
        message: str = "Invalid key",
        error_code: str = ERROR_CODE_INVALID_KEY,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class PrefixRequiredError(ValidationError):
    """Raised when the storage prefix is missing from the path."""

    cause = "Prefix is required in the path"

    def __init__(
        self,
        *,
        message: str = "Prefix is required in the path",
        error_code: str = ERROR_CODE_PREFIX_REQUIRED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class InvalidPrefixFormatError(ValidationError):
    """Raised when the storage prefix contains disallowed characters."""

    cause = "Invalid prefix format"

    def __init__(
        self,
        *,
        message: str = (
            "Prefix can only contain alphanumeric characters, hyphens, and underscores"
        ),
        error_code: str = ERROR_CODE_INVALID_PREFIX_FORMAT,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class NoFileProvidedError(ValidationError):
    """Raised when an upload request carries no files."""

    cause = "No file provided in the request"

    def __init__(
        self,
        *,
        message: str = "No file provided in the request",
        error_code: str = ERROR_CODE_NO_FILE_PROVIDED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class EmptyImageProvidedError(ValidationError):
    """Raised when an uploaded file has no content."""

    cause = "Empty image provided"

    def __init__(
        self,
        *,
        message: str = "Empty image provided",
        error_code: str = ERROR_CODE_EMPTY_IMAGE_PROVIDED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class InvalidImageError(ValidationError):
    """Raised when bytes cannot be decoded as an image."""

    cause = "Empty or invalid image file"

    def __init__(
        self,
        *,
        message: str = "Empty or invalid image file",
        error_code: str = ERROR_CODE_INVALID_IMAGE_PROVIDED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class UnsupportedImageFormatError(ValidationError):
    """Raised when an uploaded file is not an image content type."""

    cause = "Unsupported image format"

    def __init__(
        self,
        *,
        message: str = "Unsupported image format. Only image files are allowed",
        error_code: str = ERROR_CODE_UNSUPPORTED_IMAGE_FORMAT,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class DecryptionError(ImageServiceError):
    """Raised when an encrypted reference cannot be decoded.

    The message and details are fixed so callers cannot tell a bad encoding
    from a failed tag check.
    """

    kind = ErrorKind.CLIENT_INPUT
    cause = DECRYPTION_FAILED_MESSAGE

    def __init__(self) -> None:
        super().__init__(
            message=DECRYPTION_FAILED_MESSAGE,
            error_code=ERROR_CODE_DECRYPTION_FAILED,
        )


class NotFoundError(ImageServiceError):
    """Raised when a requested object is not found."""

    kind = ErrorKind.NOT_FOUND
    cause = "Image not found"

    def __init__(
        self,
        *,
        message: str = "Image not found",
        error_code: str = ERROR_CODE_IMAGE_NOT_FOUND,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class StorageError(ImageServiceError):
    """Raised when an object store operation fails."""

    cause = "Storage operation failed"

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_STORAGE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class CleanupResizedVariantsFailedError(ImageServiceError):
    """Raised when resized variants of a key could not be removed."""

    cause = "Failed to cleanup resized variants"

    def __init__(
        self,
        *,
        message: str = "Failed to cleanup resized variants",
        error_code: str = ERROR_CODE_CLEANUP_RESIZED_VARIANTS_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class HealthCheckFailedError(ImageServiceError):
    """Raised when the health check cannot be performed."""

    cause = "Failed to perform health check"

    def __init__(
        self,
        *,
        message: str = "Failed to perform health check",
        error_code: str = ERROR_CODE_HEALTH_CHECK_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class HealthCheckImageCreationFailedError(ImageServiceError):
    """Raised when the health check image cannot be created at startup."""

    cause = "Failed to create health check image"

    def __init__(
        self,
        *,
        message: str = "Failed to create health check image",
        error_code: str = ERROR_CODE_CREATE_HEALTH_CHECK_IMAGE_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )
