"""Tests for image format detection."""

import pytest

from critter_client.client.image_format_detector import (
    ImageFormat,
    detect_image_format,
)

PADDING = b"\x00" * 100


@pytest.mark.parametrize(
    ("header", "expected"),
    [
        (b"\x89PNG\r\n\x1a\n", ImageFormat.PNG),
        (b"\xff\xd8\xff\xe0", ImageFormat.JPEG),
        (b"GIF87a", ImageFormat.GIF),
        (b"GIF89a", ImageFormat.GIF),
        (b"BM", ImageFormat.BMP),
        (b"RIFF\x00\x00\x00\x00WEBP", ImageFormat.WEBP),
        (b"II*\x00", ImageFormat.TIFF),
        (b"MM\x00*", ImageFormat.TIFF),
    ],
)
def test_detects_format_from_magic_number(
    header: bytes, expected: ImageFormat
) -> None:
    """Test each supported signature is recognised."""
    assert detect_image_format(header + PADDING) == expected


@pytest.mark.parametrize(
    "data",
    [b"", b"\x89P", b"RIFF\x00\x00\x00\x00WAVE", b"%PDF-1.7", b"hello"],
)
def test_unknown_data_is_unspecified(data: bytes) -> None:
    """Test empty, short and non-image data is not claimed as an image."""
    assert detect_image_format(data) == ImageFormat.UNSPECIFIED


@pytest.mark.parametrize(
    ("image_format", "mime_type", "extension"),
    [
        (ImageFormat.PNG, "image/png", ".png"),
        (ImageFormat.JPEG, "image/jpeg", ".jpg"),
        (ImageFormat.WEBP, "image/webp", ".webp"),
        (ImageFormat.UNSPECIFIED, "", ""),
    ],
)
def test_format_mime_type_and_extension(
    image_format: ImageFormat, mime_type: str, extension: str
) -> None:
    """Test the MIME type and file extension of a format."""
    assert image_format.mime_type == mime_type
    assert image_format.extension == extension
