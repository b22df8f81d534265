"""Global constants used throughout the application.

This module centralizes all magic numbers, string literals, and configuration
values that are used across multiple modules. Using constants prevents hardcoding
values and makes it easy to change them globally.
"""

from typing import Final

# ============================================================================
# Error Codes
# ============================================================================


# Validation Errors
ERROR_CODE_VALIDATION_FAILED = "VALIDATION_ERROR"
ERROR_CODE_INVALID_SIZE_PARAMETER = "INVALID_SIZE_PARAMETER"
ERROR_CODE_KEY_REQUIRED = "KEY_REQUIRED"
ERROR_CODE_INVALID_KEY = "INVALID_KEY"
ERROR_CODE_PREFIX_REQUIRED = "PREFIX_REQUIRED"
ERROR_CODE_INVALID_PREFIX_FORMAT = "INVALID_PREFIX_FORMAT"
ERROR_CODE_NO_FILE_PROVIDED = "NO_FILE_PROVIDED"
ERROR_CODE_EMPTY_IMAGE_PROVIDED = "EMPTY_IMAGE_PROVIDED"
ERROR_CODE_INVALID_IMAGE_PROVIDED = "INVALID_IMAGE_PROVIDED"
ERROR_CODE_UNSUPPORTED_IMAGE_FORMAT = "UNSUPPORTED_IMAGE_FORMAT"
ERROR_CODE_DECRYPTION_FAILED = "DECRYPTION_FAILED"
ERROR_CODE_FILE_SIZE_EXCEEDED = "FILE_SIZE_EXCEEDED"

# Auth Errors
ERROR_CODE_UNAUTHORIZED = "UNAUTHORIZED"

# Not Found Errors
ERROR_CODE_IMAGE_NOT_FOUND = "IMAGE_NOT_FOUND"

# Storage Errors
ERROR_CODE_STORAGE = "STORAGE_ERROR"
ERROR_CODE_CLEANUP_RESIZED_VARIANTS_FAILED = "CLEANUP_RESIZED_VARIANTS_FAILED"

# Health Check Errors
ERROR_CODE_HEALTH_CHECK_FAILED = "HEALTH_CHECK_FAILED"
ERROR_CODE_CREATE_HEALTH_CHECK_IMAGE_FAILED = "CREATE_HEALTH_CHECK_IMAGE_FAILED"

# Internal / Unexpected
ERROR_CODE_UNKNOWN = "UNKNOWN"


# ============================================================================
# Size Parameter Constraints
# ============================================================================

MAX_SIZE_DIMENSION: Final[int] = 5000
MIN_SIZE_DIMENSION: Final[int] = 1
SIZE_SEPARATOR: Final[str] = "x"

# ============================================================================
# Key Codec
# ============================================================================

KEY_CODEC_SALT_LENGTH: Final[int] = 16
KEY_CODEC_IV_LENGTH: Final[int] = 12
KEY_CODEC_TAG_LENGTH: Final[int] = 16
KEY_CODEC_KEY_LENGTH: Final[int] = 32

# scrypt cost parameters (N, r, p)
KEY_CODEC_SCRYPT_N: Final[int] = 2**14
KEY_CODEC_SCRYPT_R: Final[int] = 8
KEY_CODEC_SCRYPT_P: Final[int] = 1

DECRYPTION_FAILED_MESSAGE: Final[str] = "Decryption failed"

# ============================================================================
# Storage Keys
# ============================================================================

PREFIX_PATTERN = r"^[A-Za-z0-9_-]+$"
VARIANT_KEY_SEPARATOR: Final[str] = "_"
DEFAULT_IMAGE_CONTENT_TYPE: Final[str] = "image/jpeg"
DEFAULT_HEALTH_CHECK_IMAGE_KEY: Final[str] = "health-check/health-check.png"

# ============================================================================
# File Upload Constraints
# ============================================================================

MAX_FILE_SIZE = 4 * 1024 * 1024  # 4MB in bytes
IMAGE_CONTENT_TYPE_PREFIX: Final[str] = "image/"
MAX_UPLOAD_WORKERS: Final[int] = 8

# ============================================================================
# Health Check
# ============================================================================

HEALTH_CHECK_IMAGE_SIZE: Final[int] = 400
HEALTH_CHECK_RESIZE_SIZE: Final[int] = 50

# ============================================================================
# API Gateway Configuration
# ============================================================================

CORS_ORIGIN = "*"
CORS_METHODS = "GET,POST,OPTIONS"
CORS_HEADERS = "Content-Type,Authorization,X-Api-Key"
EXPOSE_HEADERS = "Content-Type,Content-Length"
DEFAULT_CONTENT_TYPE = "application/json"

# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_AWS_ENDPOINT_URL = "AWS_ENDPOINT_URL"
ENV_AWS_REGION = "AWS_REGION"
ENV_IMAGE_S3_BUCKET_NAME = "IMAGE_S3_BUCKET_NAME"
ENV_S3_FORCE_PATH_STYLE = "S3_FORCE_PATH_STYLE"
ENV_IMAGE_KEY_ENCRYPTION_SECRET = "IMAGE_KEY_ENCRYPTION_SECRET"
ENV_HEALTH_CHECK_IMAGE_KEY = "HEALTH_CHECK_IMAGE_KEY"


def get_max_file_size_mb() -> int:
    """Get maximum file size in megabytes."""
    return MAX_FILE_SIZE // (1024 * 1024)
