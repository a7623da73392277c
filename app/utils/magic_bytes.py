"""Magic bytes detection for uploaded and served post images.

The declared Content-Type of an upload is never trusted: the stored bytes
are sniffed both when a post image is accepted and when it is served back.
"""

from typing import NamedTuple, Optional


# Minimum bytes needed for detection
MIN_BYTES_FOR_DETECTION = 4
WEBP_HEADER_LENGTH = 12


class MagicSignature(NamedTuple):
    """Magic bytes signature for a file type."""

    bytes_pattern: bytes
    mime_type: str
    extension: str
    offset: int = 0


# Reference: https://en.wikipedia.org/wiki/List_of_file_signatures
MAGIC_SIGNATURES = [
    MagicSignature(b"\xff\xd8\xff", "image/jpeg", ".jpg"),
    MagicSignature(b"\x89PNG\r\n\x1a\n", "image/png", ".png"),
    MagicSignature(b"GIF87a", "image/gif", ".gif"),
    MagicSignature(b"GIF89a", "image/gif", ".gif"),
    MagicSignature(b"BM", "image/bmp", ".bmp"),
    MagicSignature(b"II*\x00", "image/tiff", ".tiff"),
    MagicSignature(b"MM\x00*", "image/tiff", ".tiff"),
    MagicSignature(b"ftypavif", "image/avif", ".avif", offset=4),
    MagicSignature(b"ftypheic", "image/heic", ".heic", offset=4),
    MagicSignature(b"ftypmif1", "image/heic", ".heic", offset=4),
]

WEBP = MagicSignature(b"RIFF", "image/webp", ".webp")


def detect_image_type(data: bytes) -> Optional[MagicSignature]:
    """Detect the image type from the leading bytes of ``data``.

    Returns the matching signature, or None if the bytes are not a known
    image format.
    """
    if not data or len(data) < MIN_BYTES_FOR_DETECTION:
        return None

    # RIFF container is only an image when WEBP sits at offset 8
    if (
        data[:4] == b"RIFF"
        and len(data) >= WEBP_HEADER_LENGTH
        and data[8:12] == b"WEBP"
    ):
        return WEBP

    for sig in MAGIC_SIGNATURES:
        if sig.offset > 0:
            end_offset = sig.offset + len(sig.bytes_pattern)
            if len(data) >= end_offset and data[sig.offset:end_offset] == sig.bytes_pattern:
                return sig
        elif data.startswith(sig.bytes_pattern):
            return sig

    return None


def detect_content_type(data: bytes, default: str = "application/octet-stream") -> str:
    sig = detect_image_type(data)
    return sig.mime_type if sig else default


def is_valid_image(data: bytes) -> bool:
    return detect_image_type(data) is not None
