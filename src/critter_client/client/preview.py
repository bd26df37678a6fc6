"""Display handles for rendering a selected image.

A handle is a URL-like reference that lets the front end render an image
without re-reading its source. Handles derived from uploaded bytes are
revocable and must be released once superseded, in the same way a browser
object URL must be revoked. Handles pointing at a static asset reuse the asset
URL and own nothing.
"""

import logging
import types
import uuid

from critter_client.client.models import ImageData

logger = logging.getLogger(__name__)

DERIVED_SCHEME = "blob:critter/"


class PreviewHandle:
    """A display reference for one image with an explicit release."""

    def __init__(
        self,
        url: str,
        registry: "PreviewRegistry | None" = None,
    ) -> None:
        """Initialize the handle.

        Args:
            url: The reference the front end renders from.
            registry: The registry that issued the handle, or None when the
                handle points at an external asset and owns nothing.

        """
        self.url = url
        self._registry = registry
        self._released = False

    @property
    def revocable(self) -> bool:
        """Whether releasing the handle frees a registry entry."""
        return self._registry is not None

    @property
    def released(self) -> bool:
        """Whether release() has been called."""
        return self._released

    def release(self) -> None:
        """Release the handle. Calling it more than once is harmless."""
        if self._released:
            return
        self._released = True
        if self._registry is not None:
            self._registry.revoke(self.url)

    def __enter__(self) -> "PreviewHandle":
        """Context manager entry point."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: types.TracebackType | None,
    ) -> None:
        """Context manager exit point."""
        self.release()

    def __repr__(self) -> str:
        """Return a short description of the handle."""
        state = "released" if self._released else "live"
        return f"PreviewHandle({self.url!r}, {state})"


class PreviewRegistry:
    """Issues derived preview handles and tracks which are still live."""

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._live: dict[str, ImageData] = {}

    def create(self, image: ImageData) -> PreviewHandle:
        """Derive a fresh revocable handle for ``image``."""
        url = f"{DERIVED_SCHEME}{uuid.uuid4()}"
        self._live[url] = image
        logger.debug("Created preview %s for %r", url, image)
        return PreviewHandle(url, self)

    @staticmethod
    def reference(url: str) -> PreviewHandle:
        """Wrap an existing asset URL in a handle that owns nothing."""
        return PreviewHandle(url)

    def resolve(self, url: str) -> ImageData | None:
        """Return the image behind a live derived handle, if any."""
        return self._live.get(url)

    def revoke(self, url: str) -> None:
        """Forget a derived handle."""
        if self._live.pop(url, None) is not None:
            logger.debug("Revoked preview %s", url)

    @property
    def live_count(self) -> int:
        """Number of derived handles that have not been released."""
        return len(self._live)
