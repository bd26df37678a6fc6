"""Workflow controller for a single classification session.

The controller owns every piece of mutable session state: the selected image
and its preview handle, the model choice, the in-flight flag, the latest result
and the latest error. User actions call into it and the front end renders
from :meth:`WorkflowController.current_view`.

Only :meth:`~WorkflowController.classify` and
:meth:`~WorkflowController.select_example` suspend. Everything else runs to
completion synchronously, so on a single event loop no two actions interleave
inside a state update.
"""

import logging
import types
from typing import NamedTuple

from critter_client.client.asset_loader import ExampleAsset, ExampleAssetLoader
from critter_client.client.consts import (
    ASSET_LOAD_ERROR_MESSAGE,
    CLASSIFY_ERROR_MESSAGE,
)
from critter_client.client.exceptions import AssetLoadError, InferenceError
from critter_client.client.inference_client import InferenceClient
from critter_client.client.models import (
    ClassificationResult,
    ImageData,
    ModelChoice,
)
from critter_client.client.preview import PreviewHandle, PreviewRegistry
from critter_client.client.view import (
    RequestState,
    ViewState,
    derive_request_state,
)


class RequestToken(NamedTuple):
    """Immutable snapshot of the image and model a request was issued for.

    A response is applied only while the controller still holds the same
    snapshot, so a late answer for a replaced image or model is dropped.
    """

    image_generation: int
    model: ModelChoice


class WorkflowController:
    """Coordinates image selection, model choice and classification."""

    def __init__(
        self,
        inference_client: InferenceClient,
        asset_loader: ExampleAssetLoader,
        *,
        registry: PreviewRegistry | None = None,
        model: ModelChoice | str = ModelChoice.CAT_VS_DOG,
    ) -> None:
        """Initialize the controller.

        Args:
            inference_client: Adapter used to classify images.
            asset_loader: Loader used to fetch example images.
            registry: Registry derived preview handles are issued from. A
                private registry is created when omitted.
            model: The initially selected model.

        """
        self.logger = logging.getLogger(__name__)
        self.inference_client = inference_client
        self.asset_loader = asset_loader
        self.registry = registry if registry is not None else PreviewRegistry()

        self._model: ModelChoice = ModelChoice.parse(model)
        self._image: ImageData | None = None
        self._preview: PreviewHandle | None = None
        self._image_generation = 0
        self._selection_seq = 0
        self._loading = False
        self._result: ClassificationResult | None = None
        self._error: str | None = None

    @property
    def selected_image(self) -> ImageData | None:
        """The currently selected image."""
        return self._image

    @property
    def preview(self) -> PreviewHandle | None:
        """The display handle of the currently selected image."""
        return self._preview

    @property
    def model(self) -> ModelChoice:
        """The currently selected model."""
        return self._model

    @property
    def loading(self) -> bool:
        """Whether a classification is in flight."""
        return self._loading

    @property
    def request_state(self) -> RequestState:
        """State of the latest classification attempt."""
        return derive_request_state(
            loading=self._loading, result=self._result, error=self._error
        )

    def select_file(
        self, data: bytes | ImageData, filename: str | None = None
    ) -> None:
        """Select uploaded image bytes.

        A fresh preview handle is derived for the image and the previous one
        is released. Any result or error is cleared.

        Args:
            data: Encoded image bytes, or ImageData wrapping them.
            filename: Original file name of the upload.

        Raises:
            InvalidImageError: If the bytes are not an image. State is left
                untouched.

        """
        if isinstance(data, ImageData):
            image = ImageData(data.data, filename=filename or data.filename)
        else:
            image = ImageData(data, filename=filename)
        image.validate()

        self._selection_seq += 1
        self._replace_image(image, self.registry.create(image))
        self.logger.info("Selected %r", image)

    async def select_example(self, asset: ExampleAsset | str) -> None:
        """Select one of the bundled example images.

        On success the example replaces the selected image and its asset URL
        is used as the preview. On failure the error banner is set and the
        previously selected image stays as it was. If another image is
        selected while the example is being fetched, the fetched example is
        dropped.

        Args:
            asset: The example to load.

        """
        self._selection_seq += 1
        ticket = self._selection_seq
        self._clear_outcome()

        try:
            url = self.asset_loader.url_for(asset)
            image = await self.asset_loader.load(asset)
        except AssetLoadError:
            if ticket == self._selection_seq:
                self._fail(ASSET_LOAD_ERROR_MESSAGE)
            self.logger.warning("Could not load example %r", asset)
            return

        if ticket != self._selection_seq:
            self.logger.debug("Dropping superseded example %r", asset)
            return

        self._replace_image(image, self.registry.reference(url))
        self.logger.info("Selected example %s", image.filename)

    def set_model(self, choice: ModelChoice | str) -> None:
        """Select the model to classify with.

        Raises:
            InvalidModelChoiceError: If ``choice`` is not a supported model.
                State is left untouched.

        """
        self._model = ModelChoice.parse(choice)
        self._clear_outcome()
        self.logger.debug("Model set to %s", self._model.value)

    async def classify(self) -> None:
        """Classify the selected image with the selected model.

        Does nothing when no image is selected or a classification is already
        in flight. The outcome is applied only if the image and model are
        unchanged when the response arrives.
        """
        image = self._image
        if image is None or self._loading:
            return

        token = self._snapshot()
        self._loading = True
        self._clear_outcome()

        try:
            result = await self.inference_client.submit(image, token.model)
        except InferenceError:
            self._resolve(token, error=CLASSIFY_ERROR_MESSAGE)
        except Exception:  # noqa: BLE001
            # Anything unexpected is still reported as a failed attempt
            self.logger.exception("Unexpected error while classifying")
            self._resolve(token, error=CLASSIFY_ERROR_MESSAGE)
        else:
            self._resolve(token, result=result)
        finally:
            self._loading = False

    def current_view(self) -> ViewState:
        """Return a consistent snapshot of everything needed to render."""
        return ViewState(
            preview_url=self._preview.url if self._preview else None,
            model=self._model,
            loading=self._loading,
            error=self._error,
            result=self._result,
            has_image=self._image is not None,
        )

    def close(self) -> None:
        """Release the preview handle at the end of the session."""
        if self._preview is not None:
            self._preview.release()
        self._preview = None
        self._image = None
        # Outstanding requests must not land on a closed session
        self._image_generation += 1
        self._selection_seq += 1
        self._clear_outcome()

    def _snapshot(self) -> RequestToken:
        return RequestToken(self._image_generation, self._model)

    def _resolve(
        self,
        token: RequestToken,
        *,
        result: ClassificationResult | None = None,
        error: str | None = None,
    ) -> None:
        """Apply a classification outcome unless it has gone stale."""
        if token != self._snapshot():
            self.logger.debug(
                "Discarding stale response for image %d / %s",
                token.image_generation,
                token.model.value,
            )
            return
        self._result = result
        self._error = error

    def _replace_image(self, image: ImageData, preview: PreviewHandle) -> None:
        previous = self._preview
        self._image = image
        self._preview = preview
        self._image_generation += 1
        self._clear_outcome()
        if previous is not None:
            previous.release()

    def _clear_outcome(self) -> None:
        self._result = None
        self._error = None

    def _fail(self, message: str) -> None:
        self._result = None
        self._error = message

    def __enter__(self) -> "WorkflowController":
        """Context manager entry point."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: types.TracebackType | None,
    ) -> None:
        """Context manager exit point."""
        self.close()
