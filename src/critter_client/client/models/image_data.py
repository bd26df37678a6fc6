"""Owned image bytes for a single selected image."""

import hashlib
import struct
from io import BytesIO

from PIL import Image, UnidentifiedImageError

from critter_client.client.exceptions import InvalidImageError
from critter_client.client.image_format_detector import (
    ImageFormat,
    detect_image_format,
)

FALLBACK_MIME_TYPE = "application/octet-stream"


class ImageData:
    """Raw image bytes together with format details derived from them.

    Attributes:
        data: The raw image bytes exactly as supplied.
        filename: Name to present the bytes under when uploading.
        image_format: Format detected from the magic number of ``data``.

    """

    def __init__(self, data: bytes, filename: str | None = None) -> None:
        """Initialize from raw bytes.

        Args:
            data: Raw encoded image bytes.
            filename: Optional original file name. A name is derived from the
                detected format when omitted.

        """
        self.data: bytes = bytes(data)
        self.image_format: ImageFormat = detect_image_format(self.data)
        self.filename: str = filename or f"image{self.image_format.extension}"

    @property
    def mime_type(self) -> str:
        """MIME type of the image, or a generic binary type when unknown."""
        return self.image_format.mime_type or FALLBACK_MIME_TYPE

    @property
    def sha256(self) -> str:
        """Hex digest of the image bytes, used to identify it in logs."""
        return hashlib.sha256(self.data).hexdigest()

    def validate(self) -> "ImageData":
        """Check the bytes decode as an image.

        Returns:
            The same ImageData, to allow chaining.

        Raises:
            InvalidImageError: If the bytes are empty or cannot be decoded.

        """
        if not self.data:
            msg = f"{InvalidImageError.default_message}: no data"
            raise InvalidImageError(msg)
        try:
            with Image.open(BytesIO(self.data)) as image:
                image.verify()
                detected = image.format
        except (
            UnidentifiedImageError,
            Image.DecompressionBombError,
            OSError,
            SyntaxError,
            ValueError,
            struct.error,
        ) as e:
            msg = f"{InvalidImageError.default_message}: {e}"
            raise InvalidImageError(msg) from e

        if self.image_format is ImageFormat.UNSPECIFIED and detected:
            mime = Image.MIME.get(detected, "")
            if mime:
                by_mime = {fmt.mime_type: fmt for fmt in ImageFormat}
                self.image_format = by_mime.get(mime, self.image_format)
        return self

    def __len__(self) -> int:
        """Return the number of bytes held."""
        return len(self.data)

    def __repr__(self) -> str:
        """Return a short description without dumping the bytes."""
        return (
            f"ImageData(filename={self.filename!r}, "
            f"format={self.image_format.name}, size={len(self.data)})"
        )
