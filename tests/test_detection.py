import pytest

from data_uri_converter.detection import (
    MediaType,
    media_type_from_bytes,
    media_type_from_extension,
    sniff_media_type,
)

PNG_HEADER = b"\x89PNG\r\n\x1a\n"


def png_with_chunks(*chunks: bytes) -> bytes:
    return PNG_HEADER + b"\x00\x00\x00\rIHDR" + b"\x00" * 13 + b"".join(chunks)


@pytest.mark.parametrize(
    ("extension", "expected"),
    [
        (".apng", MediaType.APNG),
        (".avif", MediaType.AVIF),
        (".GIF", MediaType.GIF),
        (".jfif", MediaType.JPEG),
        (".pjp", MediaType.JPEG),
        (".Png", MediaType.PNG),
        (".svg", MediaType.SVG),
        (".webp", MediaType.WEBP),
        (".dib", MediaType.BMP),
        (".cur", MediaType.ICON),
        (".tif", MediaType.TIFF),
        (".xyz", MediaType.UNKNOWN),
        ("png", MediaType.UNKNOWN),
        ("", MediaType.UNKNOWN),
    ],
)
def test_media_type_from_extension(extension: str, expected: MediaType) -> None:
    assert media_type_from_extension(extension) is expected


def test_extension_wins_over_signature() -> None:
    assert sniff_media_type(".jpg", png_with_chunks(b"IDAT")) is MediaType.JPEG


def test_png_without_animation_control() -> None:
    assert sniff_media_type("", png_with_chunks(b"\x00\x00\x00\x00IDATxyz")) is MediaType.PNG


def test_apng_when_actl_precedes_idat() -> None:
    data = png_with_chunks(b"\x00\x00\x00\x08acTL" + b"\x00" * 8, b"\x00\x00\x00\x00IDAT")
    assert sniff_media_type(".bin", data) is MediaType.APNG


def test_png_when_actl_follows_idat() -> None:
    data = png_with_chunks(b"\x00\x00\x00\x00IDAT", b"acTL")
    assert media_type_from_bytes(data) is MediaType.PNG


def test_png_without_idat() -> None:
    assert media_type_from_bytes(png_with_chunks(b"acTL")) is MediaType.PNG


@pytest.mark.parametrize(
    ("data", "expected"),
    [
        (b"\x00\x00\x00\x1cftypavif\x00\x00", MediaType.AVIF),
        (b"GIF87a\x01\x00", MediaType.GIF),
        (b"GIF89a\x01\x00", MediaType.GIF),
        (b"\xff\xd8\xff\xe0\x00\x10JFIF", MediaType.JPEG),
        (b"RIFF\x24\x00\x00\x00WEBPVP8 ", MediaType.WEBP),
        (b"BM\x36\x00", MediaType.BMP),
        (b"PT", MediaType.BMP),
        (b"\x00\x00\x01\x00\x01\x00", MediaType.ICON),
        (b"\x00\x00\x02\x00\x01\x00", MediaType.ICON),
        (b"II*\x00\x08\x00", MediaType.TIFF),
        (b"MM\x00*\x00\x00", MediaType.TIFF),
        (b'<?xml version="1.0"?>\n<svg xmlns="http://www.w3.org/2000/svg"/>', MediaType.SVG),
        (b"<SVG></SVG>", MediaType.SVG),
    ],
)
def test_media_type_from_bytes(data: bytes, expected: MediaType) -> None:
    assert sniff_media_type("", data) is expected


def test_riff_without_webp_marker_is_unknown() -> None:
    assert media_type_from_bytes(b"RIFF\x24\x00\x00\x00WAVEfmt ") is MediaType.UNKNOWN


def test_svg_marker_beyond_scan_window_is_ignored() -> None:
    data = b" " * 1000 + b"<svg></svg>"
    assert media_type_from_bytes(data) is MediaType.UNKNOWN
    assert media_type_from_bytes(b" " * 996 + b"<svg") is MediaType.SVG


def test_unknown_bytes_and_extension() -> None:
    assert sniff_media_type(".xyz", bytes([0x00, 0x01, 0x02])) is MediaType.UNKNOWN
    assert MediaType.UNKNOWN.value == ""


@pytest.mark.parametrize("data", [b"", b"\x89", b"\x89PNG", b"GIF8", b"\xff\xd8", b"RIFF", b"\x00\x00\x01"])
def test_truncated_input_does_not_raise(data: bytes) -> None:
    assert media_type_from_bytes(data) is MediaType.UNKNOWN


def test_sniff_is_deterministic() -> None:
    data = png_with_chunks(b"acTL", b"IDAT")
    assert {sniff_media_type("", data) for _ in range(5)} == {MediaType.APNG}


def test_accepts_bytearray() -> None:
    assert media_type_from_bytes(bytearray(b"GIF89a")) is MediaType.GIF
