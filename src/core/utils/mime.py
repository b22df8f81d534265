"""Content type sniffing for uploads that do not declare one."""

from collections.abc import Sequence

# (offset, signature, content type)
IMAGE_SIGNATURES: Sequence[tuple[int, bytes, str]] = (
    (0, b"\xff\xd8\xff", "image/jpeg"),
    (0, b"\x89PNG\r\n\x1a\n", "image/png"),
    (0, b"GIF87a", "image/gif"),
    (0, b"GIF89a", "image/gif"),
    (8, b"WEBP", "image/webp"),
    (0, b"BM", "image/bmp"),
    (0, b"II*\x00", "image/tiff"),
    (0, b"MM\x00*", "image/tiff"),
)


def detect_mime_type(file_data: bytes) -> str | None:
    """Sniff the image content type from magic bytes.

    Returns None when the data matches no known image signature; the caller
    decides whether that is an error.
    """
    for offset, signature, content_type in IMAGE_SIGNATURES:
        if file_data[offset : offset + len(signature)] == signature:
            # WebP lives inside a RIFF container
            if content_type == "image/webp" and not file_data.startswith(b"RIFF"):
                continue
            return content_type

    return None
