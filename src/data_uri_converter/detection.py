from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class MediaType(str, Enum):
    APNG = "image/apng"
    AVIF = "image/avif"
    GIF = "image/gif"
    JPEG = "image/jpeg"
    PNG = "image/png"
    SVG = "image/svg+xml"
    WEBP = "image/webp"
    BMP = "image/bmp"
    ICON = "image/x-icon"
    TIFF = "image/tiff"
    UNKNOWN = ""

    @property
    def is_known(self) -> bool:
        return self is not MediaType.UNKNOWN


EXTENSION_MAP: dict[str, MediaType] = {
    ".apng": MediaType.APNG,
    ".avif": MediaType.AVIF,
    ".gif": MediaType.GIF,
    ".jpeg": MediaType.JPEG,
    ".jpg": MediaType.JPEG,
    ".jfif": MediaType.JPEG,
    ".pjpeg": MediaType.JPEG,
    ".pjp": MediaType.JPEG,
    ".jpe": MediaType.JPEG,
    ".jif": MediaType.JPEG,
    ".jfi": MediaType.JPEG,
    ".png": MediaType.PNG,
    ".svg": MediaType.SVG,
    ".webp": MediaType.WEBP,
    ".bmp": MediaType.BMP,
    ".dib": MediaType.BMP,
    ".ico": MediaType.ICON,
    ".cur": MediaType.ICON,
    ".tiff": MediaType.TIFF,
    ".tif": MediaType.TIFF,
}


@dataclass(frozen=True, slots=True)
class Signature:
    """Byte patterns that must all appear at their offsets."""

    media_type: MediaType
    parts: tuple[tuple[int, bytes], ...]

    def matches(self, data: bytes) -> bool:
        return all(data[offset : offset + len(pattern)] == pattern for offset, pattern in self.parts)


PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"

# Tested in order, first match wins. PNG is resolved separately (png vs apng).
SIGNATURES: tuple[Signature, ...] = (
    Signature(MediaType.AVIF, ((4, b"ftypavif"),)),
    Signature(MediaType.GIF, ((0, b"GIF89a"),)),
    Signature(MediaType.GIF, ((0, b"GIF87a"),)),
    Signature(MediaType.JPEG, ((0, b"\xff\xd8\xff"),)),
    Signature(MediaType.PNG, ((0, PNG_SIGNATURE),)),
    Signature(MediaType.WEBP, ((0, b"RIFF"), (8, b"WEBPVP8"))),
    Signature(MediaType.BMP, ((0, b"BM"),)),
    Signature(MediaType.BMP, ((0, b"BA"),)),
    Signature(MediaType.BMP, ((0, b"CI"),)),
    Signature(MediaType.BMP, ((0, b"CP"),)),
    Signature(MediaType.BMP, ((0, b"IC"),)),
    Signature(MediaType.BMP, ((0, b"PT"),)),
    Signature(MediaType.ICON, ((0, b"\x00\x00\x01\x00"),)),
    Signature(MediaType.ICON, ((0, b"\x00\x00\x02\x00"),)),
    Signature(MediaType.TIFF, ((0, b"II*\x00"),)),
    Signature(MediaType.TIFF, ((0, b"MM\x00*"),)),
)

SVG_SCAN_LIMIT = 1000
SVG_MARKERS = (b"<svg", b"<SVG")


def media_type_from_extension(extension: str) -> MediaType:
    return EXTENSION_MAP.get(extension.lower(), MediaType.UNKNOWN)


def _png_or_apng(data: bytes) -> MediaType:
    # Animated only when acTL sits entirely before the first IDAT chunk.
    idat = data.find(b"IDAT")
    if idat != -1 and data.find(b"acTL", 0, idat) != -1:
        return MediaType.APNG
    return MediaType.PNG


def _looks_like_svg(data: bytes) -> bool:
    head = data[:SVG_SCAN_LIMIT]
    return any(marker in head for marker in SVG_MARKERS)


def media_type_from_bytes(data: bytes) -> MediaType:
    """Identify an image from its leading bytes.

    Short or malformed input never raises; a pattern that does not fit in
    ``data`` simply fails to match.
    """
    data = bytes(data)
    for signature in SIGNATURES:
        if signature.matches(data):
            if signature.media_type is MediaType.PNG:
                return _png_or_apng(data)
            return signature.media_type
    if _looks_like_svg(data):
        return MediaType.SVG
    return MediaType.UNKNOWN


def sniff_media_type(extension: str, data: bytes) -> MediaType:
    """Resolve a media type, preferring the extension over the content."""
    media_type = media_type_from_extension(extension)
    if media_type.is_known:
        return media_type
    return media_type_from_bytes(data)


__all__ = [
    "EXTENSION_MAP",
    "MediaType",
    "SIGNATURES",
    "Signature",
    "media_type_from_bytes",
    "media_type_from_extension",
    "sniff_media_type",
]
