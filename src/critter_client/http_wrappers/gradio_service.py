"""Low-level HTTP client for a Gradio Space endpoint.

A call against a Space happens in three steps: the file is uploaded, the
prediction is queued and an event id returned, and the result is read from a
server-sent event stream for that event id.
"""

import json
import logging
from typing import Any

import httpx

from critter_client.client.exceptions import (
    InferenceError,
    InvalidResponseError,
)
from critter_client.client.models import ImageData

API_PREFIX = "/gradio_api"
FILE_DATA_META = {"_type": "gradio.FileData"}

EVENT_COMPLETE = "complete"
EVENT_ERROR = "error"


class GradioSpaceService:
    """Low-level HTTP wrapper for the Gradio call protocol."""

    def __init__(self, http_client: httpx.AsyncClient) -> None:
        """Initialize the service with an HTTP client.

        Args:
            http_client (httpx.AsyncClient): Client rooted at the Space URL.

        """
        self.logger = logging.getLogger(__name__)
        self.http_client = http_client

    async def upload(self, image: ImageData) -> str:
        """Upload image bytes and return the server-side file path."""
        response = await self.http_client.post(
            f"{API_PREFIX}/upload",
            files={"files": (image.filename, image.data, image.mime_type)},
        )
        _ = response.raise_for_status()

        paths = _decode_json(response)
        if not isinstance(paths, list) or not paths:
            msg = f"{InvalidResponseError.default_message}: no upload path"
            raise InvalidResponseError(msg)
        if not isinstance(paths[0], str):
            msg = f"{InvalidResponseError.default_message}: bad upload path"
            raise InvalidResponseError(msg)
        return paths[0]

    async def submit(self, api_name: str, data: list[Any]) -> str:
        """Queue a prediction and return its event id."""
        response = await self.http_client.post(
            f"{API_PREFIX}/call{api_name}", json={"data": data}
        )
        _ = response.raise_for_status()

        body = _decode_json(response)
        event_id = body.get("event_id") if isinstance(body, dict) else None
        if not isinstance(event_id, str) or not event_id:
            msg = f"{InvalidResponseError.default_message}: missing event_id"
            raise InvalidResponseError(msg)
        return event_id

    async def fetch_result(self, api_name: str, event_id: str) -> list[Any]:
        """Read the event stream for ``event_id`` until it completes.

        Returns:
            The list of output values carried by the ``complete`` event.

        Raises:
            InferenceError: If the Space reports an error event.
            InvalidResponseError: If the stream ends without a result or the
                result is not a JSON list.

        """
        async with self.http_client.stream(
            "GET", f"{API_PREFIX}/call{api_name}/{event_id}"
        ) as response:
            _ = response.raise_for_status()

            event: str | None = None
            data_lines: list[str] = []
            async for line in response.aiter_lines():
                if line.startswith("event:"):
                    event = line.removeprefix("event:").strip()
                elif line.startswith("data:"):
                    data_lines.append(line.removeprefix("data:").strip())
                elif not line:
                    if event in (EVENT_COMPLETE, EVENT_ERROR):
                        break
                    event = None
                    data_lines = []

        payload = "\n".join(data_lines)
        self.logger.debug("Event %s finished with %r", event_id, event)

        if event == EVENT_ERROR:
            msg = f"{InferenceError.default_message}: {payload or 'no detail'}"
            raise InferenceError(msg)
        if event != EVENT_COMPLETE:
            msg = f"{InvalidResponseError.default_message}: stream ended early"
            raise InvalidResponseError(msg)

        try:
            outputs = json.loads(payload)
        except ValueError as e:
            msg = f"{InvalidResponseError.default_message}: {e}"
            raise InvalidResponseError(msg) from e
        if not isinstance(outputs, list):
            msg = f"{InvalidResponseError.default_message}: expected list"
            raise InvalidResponseError(msg)
        return outputs

    async def predict(
        self, api_name: str, image: ImageData, model_choice: str
    ) -> Any:  # noqa: ANN401 - decoded JSON
        """Run ``api_name`` on an image and model, returning its first output.

        Raises:
            InvalidResponseError: If the endpoint returned no outputs.

        """
        path = await self.upload(image)
        file_data = {
            "path": path,
            "orig_name": image.filename,
            "mime_type": image.mime_type,
            "meta": FILE_DATA_META,
        }
        event_id = await self.submit(api_name, [file_data, model_choice])
        self.logger.debug("Queued %s as event %s", api_name, event_id)

        outputs = await self.fetch_result(api_name, event_id)
        if not outputs:
            msg = f"{InvalidResponseError.default_message}: no outputs"
            raise InvalidResponseError(msg)
        return outputs[0]


def _decode_json(response: httpx.Response) -> Any:  # noqa: ANN401 - decoded JSON
    """Decode a JSON body, reporting failures as invalid responses."""
    try:
        return response.json()
    except ValueError as e:
        # Covers both malformed JSON and bodies that are not valid UTF-8
        msg = f"{InvalidResponseError.default_message}: {e}"
        raise InvalidResponseError(msg) from e
