"""The Inference Client Class."""

import asyncio
import logging
import types

import httpx

from critter_client.client.exceptions import CritterError, InferenceError
from critter_client.client.models import (
    ClassificationResult,
    ImageData,
    ModelChoice,
)
from critter_client.client.options import ClientOptions
from critter_client.http_wrappers.gradio_service import GradioSpaceService


class InferenceClient:
    """The Inference Client Class.

    This class submits one image to the remote classification service and
    returns the parsed result. It keeps no state between calls, so a single
    instance can be shared or a fresh one built for every request.
    """

    def __init__(
        self, http_client: httpx.AsyncClient, options: ClientOptions
    ) -> None:
        """Initialize the Inference Client.

        Args:
            http_client: The HTTP client to use for communication, rooted at
                the Space URL.
            options: Configuration options for the client.

        """
        self.logger = logging.getLogger(__name__)
        self.options = options
        self.http_client = http_client
        self.service = GradioSpaceService(self.http_client)

    async def submit(
        self, image: ImageData, model: ModelChoice
    ) -> ClassificationResult:
        """Classify an image with the chosen model.

        The whole exchange is bounded by ``options.timeout`` and attempted
        exactly once.

        Args:
            image: The image to classify.
            model: Which remote model to classify it with.

        Returns:
            The parsed classification result, best guess first.

        Raises:
            InferenceError: For every failure, whether the connection failed,
                the time budget ran out, the service answered with an error
                or the response was malformed.

        """
        start_time = asyncio.get_running_loop().time()
        self.logger.info(
            "Classifying %r with %s (timeout %.1fs)",
            image,
            model.value,
            self.options.timeout,
        )

        try:
            async with asyncio.timeout(self.options.timeout):
                payload = await self.service.predict(
                    self.options.api_name, image, model.value
                )
            result = ClassificationResult.from_payload(payload)
        except TimeoutError as e:
            self.logger.warning(
                "Classification timed out after %.1fs", self.options.timeout
            )
            raise InferenceError(InferenceError.default_message) from e
        except (httpx.HTTPError, httpx.StreamError, CritterError) as e:
            self.logger.warning(
                "Classification failed (%s): %s", type(e).__name__, e
            )
            raise InferenceError(InferenceError.default_message) from e

        self.logger.info(
            "Classified as %r in %.2fs",
            result.label,
            asyncio.get_running_loop().time() - start_time,
        )
        return result

    async def close(self) -> None:
        """Close the client and its HTTP connection pool."""
        try:
            await self.http_client.aclose()
        except (httpx.HTTPError, OSError) as e:
            self.logger.debug("Error closing HTTP client: %s", str(e))

    async def __aenter__(self) -> "InferenceClient":
        """Context manager entry point."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: types.TracebackType | None,
    ) -> None:
        """Context manager exit point."""
        await self.close()
