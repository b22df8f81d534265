"""Storage key helpers: prefixes, generation, plain paths and variant keys."""

import re
import uuid

from core.models.errors import InvalidKeyError, InvalidPrefixFormatError, PrefixRequiredError
from core.models.size import SizeSpec
from core.utils.constants import PREFIX_PATTERN, VARIANT_KEY_SEPARATOR
from core.utils.time import utc_now_millis

_PREFIX_RE = re.compile(PREFIX_PATTERN)


def validate_prefix(prefix: str | None) -> str:
    """Return the prefix if it is present and well formed.

    Raises:
        PrefixRequiredError: If the prefix is missing or blank
        InvalidPrefixFormatError: If it contains characters outside
            ``[A-Za-z0-9_-]``
    """
    if prefix is None or not prefix.strip():
        raise PrefixRequiredError()

    if not _PREFIX_RE.fullmatch(prefix):
        raise InvalidPrefixFormatError(details={"prefix": prefix})

    return prefix


def generate_storage_key(prefix: str) -> str:
    """Generate a new ``{prefix}/{epoch_millis}-{uuid4}`` storage key."""
    return f"{validate_prefix(prefix)}/{utc_now_millis()}-{uuid.uuid4()}"


def storage_key_from_path(path: str | None) -> str:
    """Turn a plain ``{prefix}/{rest...}`` path into a storage key.

    Empty segments (leading, trailing or doubled slashes) are dropped.
    """
    segments = [segment for segment in (path or "").split("/") if segment]

    if not segments:
        raise PrefixRequiredError()

    validate_prefix(segments[0])

    if len(segments) == 1:
        raise InvalidKeyError(details={"path": path})

    return "/".join(segments)


def variant_prefix(key: str) -> str:
    """Prefix shared by every resized variant of ``key``."""
    return f"{key}{VARIANT_KEY_SEPARATOR}"


def build_variant_key(key: str, size: SizeSpec) -> str:
    """Deterministic cache key of the ``size`` variant of ``key``."""
    return f"{variant_prefix(key)}{size.normalized}"
