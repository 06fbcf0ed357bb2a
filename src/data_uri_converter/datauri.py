from __future__ import annotations

import base64

from .detection import MediaType, sniff_media_type


def to_data_uri(media_type: MediaType | str, data: bytes) -> str:
    """Build an RFC 2397 ``data:`` URI with a base64 payload.

    An unknown media type is written as-is, producing ``data:;base64,...``.
    """
    value = media_type.value if isinstance(media_type, MediaType) else media_type
    payload = base64.b64encode(data).decode("ascii")
    return f"data:{value};base64,{payload}"


def encode_image(data: bytes, extension: str) -> str:
    return to_data_uri(sniff_media_type(extension, data), data)


__all__ = ["encode_image", "to_data_uri"]
