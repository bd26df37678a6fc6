"""Utility for detecting image formats from raw bytes."""

import enum


class ImageFormat(enum.Enum):
    """Image formats recognised by the client, valued by MIME type."""

    UNSPECIFIED = ""
    PNG = "image/png"
    JPEG = "image/jpeg"
    GIF = "image/gif"
    BMP = "image/bmp"
    WEBP = "image/webp"
    TIFF = "image/tiff"

    @property
    def mime_type(self) -> str:
        """MIME type for the format, empty when unknown."""
        return self.value

    @property
    def extension(self) -> str:
        """Conventional file extension for the format, including the dot."""
        if self is ImageFormat.UNSPECIFIED:
            return ""
        if self is ImageFormat.JPEG:
            return ".jpg"
        return f".{self.name.lower()}"


def detect_image_format(data: bytes) -> ImageFormat:
    """Detect image format from raw bytes using magic number signatures.

    Args:
    ----
        data: Raw image bytes to analyze

    Returns:
    -------
        ImageFormat enum value representing the detected format

    """
    if not data:
        return ImageFormat.UNSPECIFIED

    # PNG: starts with \x89PNG (need at least 4 bytes)
    if len(data) >= 4 and data[:4] == b"\x89PNG":
        return ImageFormat.PNG

    # JPEG: starts with \xFF\xD8\xFF (need at least 3 bytes)
    if len(data) >= 3 and data[:3] == b"\xFF\xD8\xFF":
        return ImageFormat.JPEG

    # GIF: starts with GIF87a or GIF89a (need at least 6 bytes)
    if len(data) >= 6 and data[:6] in (b"GIF87a", b"GIF89a"):
        return ImageFormat.GIF

    # BMP: starts with BM (need at least 2 bytes)
    if len(data) >= 2 and data[:2] == b"BM":
        return ImageFormat.BMP

    # WebP: starts with RIFF....WEBP (need at least 12 bytes)
    if len(data) >= 12 and data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return ImageFormat.WEBP

    # TIFF: starts with II* or MM* (need at least 4 bytes)
    if len(data) >= 4 and data[:4] in (b"II*\x00", b"MM\x00*"):
        return ImageFormat.TIFF

    return ImageFormat.UNSPECIFIED
