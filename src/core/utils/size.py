"""Parsing of ``WxH`` / ``N`` size descriptors."""

from aws_lambda_powertools import Logger

from core.models.errors import InvalidSizeParameterError
from core.models.size import SizeSpec
from core.utils.constants import MAX_SIZE_DIMENSION, MIN_SIZE_DIMENSION, SIZE_SEPARATOR

logger = Logger(UTC=True)

STAGE_SYNTAX = "syntax"
STAGE_BOUNDS = "bounds"


def _parse_dimension(token: str, *, name: str) -> int:
    # ASCII digits only: str.isdigit() alone accepts superscripts and other scripts
    if not token or not token.isascii() or not token.isdigit():
        raise InvalidSizeParameterError(
            details={
                "reason": f"{name.capitalize()} {token!r} is not a valid number",
                "stage": STAGE_SYNTAX,
            }
        )

    value = int(token)
    if str(value) != token:
        raise InvalidSizeParameterError(
            details={
                "reason": f"{name.capitalize()} {token!r} is not in canonical form",
                "stage": STAGE_SYNTAX,
            }
        )

    return value


def parse_size(value: str) -> SizeSpec:
    """Parse a size descriptor into a validated :class:`SizeSpec`.

    Accepts ``"<width>x<height>"`` or a single ``"<n>"``, which is read as a
    square ``n x n``. Matching is case-insensitive and surrounding whitespace
    is ignored.

    Args:
        value: Raw size string from the request

    Returns:
        Validated size specification

    Raises:
        InvalidSizeParameterError: With ``details["stage"]`` set to
            ``"syntax"`` or ``"bounds"`` depending on which check failed
    """
    size = (value or "").strip().lower()

    if SIZE_SEPARATOR in size:
        parts = size.split(SIZE_SEPARATOR)
        if len(parts) != 2:
            raise InvalidSizeParameterError(
                details={
                    "reason": "Invalid size format. Expected format: WIDTHxHEIGHT",
                    "stage": STAGE_SYNTAX,
                }
            )
        width = _parse_dimension(parts[0], name="width")
        height = _parse_dimension(parts[1], name="height")
    else:
        width = height = _parse_dimension(size, name="width")

    for dimension in (width, height):
        if dimension < MIN_SIZE_DIMENSION:
            raise InvalidSizeParameterError(
                details={
                    "reason": "Dimensions must be positive numbers",
                    "stage": STAGE_BOUNDS,
                }
            )
        if dimension > MAX_SIZE_DIMENSION:
            raise InvalidSizeParameterError(
                details={
                    "reason": (
                        "Dimensions exceed maximum allowed size of "
                        f"{MAX_SIZE_DIMENSION}x{MAX_SIZE_DIMENSION}"
                    ),
                    "stage": STAGE_BOUNDS,
                }
            )

    logger.debug("Parsed size parameter", extra={"width": width, "height": height})
    return SizeSpec(width=width, height=height)
