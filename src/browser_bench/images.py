"""Pixel dimensions straight from encoded image headers.

Each supported format has its own small parser keyed by MIME type. Parsers
return None for anything they cannot read; ``inspect_image`` guarantees no
exception escapes to the caller.
"""

from __future__ import annotations

import base64
import binascii
import io
import struct
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from PIL import Image


class ImageMimeType(str, Enum):
    PNG = "image/png"
    JPEG = "image/jpeg"
    GIF = "image/gif"
    WEBP = "image/webp"


@dataclass(frozen=True)
class ImageDescriptor:
    width: int
    height: int


@dataclass(frozen=True)
class ExtractedImage:
    """Base64 image payload with a validated MIME type."""
    data: str
    mime_type: ImageMimeType

    @property
    def size_bytes(self) -> int:
        # decoded length, computed without decoding
        return len(self.data) * 3 // 4 - self.data[-2:].count("=")


PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
PNG_MIN_LENGTH = 24
GIF_MIN_LENGTH = 10
WEBP_MIN_LENGTH = 30


def is_valid_mime_type(candidate: object) -> bool:
    """True if ``candidate`` is one of the four supported image MIME types."""
    if isinstance(candidate, ImageMimeType):
        return True
    if not isinstance(candidate, str):
        return False
    return candidate in {m.value for m in ImageMimeType}


def png_dimensions(buffer: bytes) -> ImageDescriptor | None:
    # 8-byte signature, IHDR length + type, then width/height as uint32 BE
    if len(buffer) < PNG_MIN_LENGTH or not buffer.startswith(PNG_SIGNATURE):
        return None
    width, height = struct.unpack_from(">II", buffer, 16)
    return ImageDescriptor(width, height)


def jpeg_dimensions(buffer: bytes) -> ImageDescriptor | None:
    # Pillow stops after the SOF marker; pixel data is never decoded here.
    with Image.open(io.BytesIO(buffer)) as img:
        if img.format != "JPEG":
            return None
        width, height = img.size
    return ImageDescriptor(width, height)


def gif_dimensions(buffer: bytes) -> ImageDescriptor | None:
    if len(buffer) < GIF_MIN_LENGTH:
        return None
    width, height = struct.unpack_from("<HH", buffer, 6)
    return ImageDescriptor(width, height)


def webp_dimensions(buffer: bytes) -> ImageDescriptor | None:
    if len(buffer) < WEBP_MIN_LENGTH:
        return None
    if buffer[0:4] != b"RIFF" or buffer[8:12] != b"WEBP":
        return None

    chunk = buffer[12:16]
    if chunk == b"VP8 ":
        width, height = struct.unpack_from("<HH", buffer, 26)
        return ImageDescriptor(width & 0x3FFF, height & 0x3FFF)
    if chunk == b"VP8L":
        (bits,) = struct.unpack_from("<I", buffer, 21)
        return ImageDescriptor((bits & 0x3FFF) + 1, ((bits >> 14) & 0x3FFF) + 1)
    # VP8X (extended) and anything else is not supported
    return None


PARSERS: dict[ImageMimeType, Callable[[bytes], ImageDescriptor | None]] = {
    ImageMimeType.PNG: png_dimensions,
    ImageMimeType.JPEG: jpeg_dimensions,
    ImageMimeType.GIF: gif_dimensions,
    ImageMimeType.WEBP: webp_dimensions,
}


def inspect_image(buffer: bytes, mime_type: ImageMimeType | str) -> ImageDescriptor | None:
    """Read width/height from ``buffer`` for the claimed ``mime_type``.

    Returns None for unsupported types, truncated or malformed buffers, and
    headers that decode to a zero dimension.
    """
    if not is_valid_mime_type(mime_type):
        return None
    parser = PARSERS[ImageMimeType(mime_type)]
    try:
        descriptor = parser(buffer)
    except Exception:
        return None
    if descriptor is None or descriptor.width <= 0 or descriptor.height <= 0:
        return None
    return descriptor


def image_dimensions_from_base64(data: str, mime_type: ImageMimeType | str) -> ImageDescriptor | None:
    """Decode base64 ``data`` and inspect it.

    Whitespace and missing padding are tolerated, as screenshot payloads are
    sometimes line-wrapped or unpadded.
    """
    compact = "".join(data.split())
    try:
        buffer = base64.b64decode(compact + "=" * (-len(compact) % 4))
    except (binascii.Error, ValueError):
        return None
    return inspect_image(buffer, mime_type)
