"""Loader for the bundled example images."""

import enum
import logging

import httpx

from critter_client.client.consts import ASSET_FETCH_TIMEOUT
from critter_client.client.exceptions import AssetLoadError, InvalidImageError
from critter_client.client.models import ImageData


class ExampleAsset(enum.Enum):
    """The fixed set of example images, valued by file name."""

    CAT = "cat.jpg"
    DOG = "dog.jpg"
    TEDDY = "teddy.jpg"
    GRIZZLY = "grizzly.jpg"
    DUNNO = "dunno.jpg"
    BLACK = "black.jpg"

    @classmethod
    def parse(cls, value: "ExampleAsset | str") -> "ExampleAsset":
        """Resolve a member, its file name or its member name.

        Raises:
            AssetLoadError: If ``value`` names no bundled asset.

        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for asset in cls:
                if value in (asset.value, asset.name, asset.name.lower()):
                    return asset
        msg = f"{AssetLoadError.default_message}: unknown asset {value!r}"
        raise AssetLoadError(msg)


class ExampleAssetLoader:
    """Fetches example images and turns them into uploadable image data.

    Attributes:
        base_url: URL the asset file names are resolved against.

    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: str,
        timeout: float = ASSET_FETCH_TIMEOUT,
    ) -> None:
        """Initialize the loader.

        Args:
            http_client: Client used to fetch the assets.
            base_url: URL the asset file names are resolved against.
            timeout: Seconds allowed for a single fetch.

        """
        self.logger = logging.getLogger(__name__)
        self.http_client = http_client
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def url_for(self, asset: ExampleAsset | str) -> str:
        """Return the URL an asset is served from."""
        return f"{self.base_url}/{ExampleAsset.parse(asset).value}"

    async def load(self, asset: ExampleAsset | str) -> ImageData:
        """Fetch an example asset.

        Args:
            asset: The asset to fetch.

        Returns:
            The asset bytes as ImageData, named after the asset file.

        Raises:
            AssetLoadError: If the asset is unknown, cannot be fetched or does
                not decode as an image.

        """
        resolved = ExampleAsset.parse(asset)
        url = self.url_for(resolved)
        self.logger.debug("Fetching example asset %s from %s", resolved, url)

        try:
            response = await self.http_client.get(url, timeout=self.timeout)
            _ = response.raise_for_status()
            image = ImageData(response.content, filename=resolved.value)
            return image.validate()
        except (httpx.HTTPError, InvalidImageError) as e:
            self.logger.warning("Failed to load %s: %s", resolved.value, e)
            msg = f"{AssetLoadError.default_message}: {resolved.value}"
            raise AssetLoadError(msg) from e
