"""Pillow-backed image processing: resizing, inspection and metadata."""

from io import BytesIO
from typing import Any

from aws_lambda_powertools import Logger
from PIL import ExifTags, Image, ImageDraw, IptcImagePlugin, UnidentifiedImageError
from PIL.Image import Resampling

from core.models.errors import InvalidImageError
from core.models.size import SizeSpec
from core.utils.constants import HEALTH_CHECK_IMAGE_SIZE
from core.utils.time import utc_now_iso

logger = Logger(UTC=True)

# Errors Pillow raises for unreadable or hostile input
_DECODE_ERRORS = (
    UnidentifiedImageError,
    Image.DecompressionBombError,
    OSError,
    SyntaxError,
    ValueError,
)

# Formats that cannot carry an alpha channel or a palette on save
_RGB_ONLY_FORMATS = frozenset({"JPEG"})

_ORIENTATION_TAG = 0x0112

# Pillow mode -> (colour space, per-channel sample format)
_MODE_SPACE_DEPTH: dict[str, tuple[str, str]] = {
    "1": ("b-w", "uchar"),
    "L": ("b-w", "uchar"),
    "LA": ("b-w", "uchar"),
    "P": ("srgb", "uchar"),
    "PA": ("srgb", "uchar"),
    "RGB": ("srgb", "uchar"),
    "RGBA": ("srgb", "uchar"),
    "RGBX": ("srgb", "uchar"),
    "CMYK": ("cmyk", "uchar"),
    "YCbCr": ("srgb", "uchar"),
    "LAB": ("lab", "uchar"),
    "HSV": ("srgb", "uchar"),
    "I": ("b-w", "int"),
    "I;16": ("grey16", "ushort"),
    "I;16B": ("grey16", "ushort"),
    "I;16L": ("grey16", "ushort"),
    "F": ("b-w", "float"),
}


def _json_safe(value: Any) -> Any:
    """Convert EXIF values into JSON-serializable primitives."""
    if isinstance(value, (str, int, bool)) or value is None:
        return value
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace").rstrip("\x00")
    if isinstance(value, (tuple, list)):
        return [_json_safe(item) for item in value]
    try:
        return float(value)
    except (TypeError, ValueError):
        return str(value)


class ImageProcessor:
    """Image operations used by the resize cache, uploads and health check."""

    def resize_to_fit(self, data: bytes, size: SizeSpec) -> bytes:
        """Resize so the image fits inside ``size``.

        Aspect ratio is preserved and the image is never enlarged: an image
        already inside the box is re-encoded at its own dimensions. Output
        keeps the source format.

        Raises:
            InvalidImageError: If the bytes cannot be decoded
        """
        try:
            with Image.open(BytesIO(data)) as img:
                image_format = img.format or "PNG"
                img.load()

                resized = img.copy()
                resized.thumbnail((size.width, size.height), Resampling.LANCZOS)

                if image_format in _RGB_ONLY_FORMATS and resized.mode not in ("RGB", "L"):
                    resized = resized.convert("RGB")

                with BytesIO() as buffer:
                    resized.save(buffer, format=image_format)
                    output = buffer.getvalue()

        except _DECODE_ERRORS as exc:
            logger.warning(
                "Image could not be resized",
                extra={"error": str(exc), "error_type": type(exc).__name__},
            )
            raise InvalidImageError() from exc

        logger.debug(
            "Image resized",
            extra={
                "requested": size.normalized,
                "width": resized.width,
                "height": resized.height,
                "format": image_format,
            },
        )
        return output

    def inspect(self, data: bytes) -> dict[str, Any]:
        """Verify that ``data`` is a decodable image and return its basics.

        Raises:
            InvalidImageError: If the bytes are empty or not an image
        """
        if not data:
            raise InvalidImageError()

        try:
            with Image.open(BytesIO(data)) as img:
                img.verify()

            # verify() leaves the image unusable, reopen for attributes
            with Image.open(BytesIO(data)) as img:
                return {
                    "width": img.width,
                    "height": img.height,
                    "format": img.format,
                    "mode": img.mode,
                }

        except _DECODE_ERRORS as exc:
            raise InvalidImageError() from exc

    def extract_metadata(self, data: bytes) -> dict[str, Any]:
        """Extract EXIF, IPTC and XMP metadata plus image properties.

        Returns an empty dict when the image cannot be read; metadata is
        informational and never fails an upload.
        """
        try:
            with Image.open(BytesIO(data)) as img:
                exif = img.getexif()
                tags = {
                    ExifTags.TAGS.get(tag_id, str(tag_id)): _json_safe(value)
                    for tag_id, value in exif.items()
                }
                iptc = IptcImagePlugin.getiptcinfo(img) or {}
                xmp = img.info.get("xmp") or img.info.get("XML:com.adobe.xmp")
                dpi = img.info.get("dpi")
                space, depth = _MODE_SPACE_DEPTH.get(img.mode, (None, None))

                return {
                    "exif": tags,
                    "iptc": {
                        f"{record}:{dataset}": _json_safe(value)
                        for (record, dataset), value in iptc.items()
                    },
                    "xmp": _json_safe(xmp) if xmp else None,
                    "dimensions": {
                        "width": img.width,
                        "height": img.height,
                        "format": img.format,
                        "size": len(data),
                        "mode": img.mode,
                        "space": space,
                        "channels": len(img.getbands()),
                        "depth": depth,
                        "density": _json_safe(dpi[0]) if dpi else None,
                        "compression": img.info.get("compression"),
                        "progressive": bool(img.info.get("progressive")),
                        "has_profile": "icc_profile" in img.info,
                        "has_alpha": "A" in img.getbands() or "transparency" in img.info,
                        "orientation": exif.get(_ORIENTATION_TAG),
                    },
                }

        except _DECODE_ERRORS as exc:
            logger.warning(
                "Error extracting image metadata",
                extra={"error": str(exc), "error_type": type(exc).__name__},
            )
            return {}

    def create_health_check_image(self) -> bytes:
        """Render the PNG image used by the health check."""
        side = HEALTH_CHECK_IMAGE_SIZE

        mask = Image.linear_gradient("L").resize((side, side))
        green = Image.new("RGB", (side, side), (0, 255, 0))
        blue = Image.new("RGB", (side, side), (0, 0, 255))
        img = Image.composite(blue, green, mask)

        text = f"Health Check {utc_now_iso()}"
        draw = ImageDraw.Draw(img)
        left, top, right, bottom = draw.textbbox((0, 0), text)
        position = ((side - (right - left)) / 2, (side - (bottom - top)) / 2)
        draw.text(position, text, fill="white")

        with BytesIO() as buffer:
            img.save(buffer, format="PNG")
            return buffer.getvalue()
