"""Gradio front end for the critter classifier.

Every browser session gets its own :class:`WorkflowController`, kept in a
``gr.State``. The inference client, the asset loader and the preview registry
are built once with the app and injected into each session's controller.
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from io import BytesIO
from typing import Any

import gradio as gr
import httpx
from PIL import Image

from critter_client.client.asset_loader import ExampleAsset, ExampleAssetLoader
from critter_client.client.controller import WorkflowController
from critter_client.client.exceptions import (
    InvalidImageError,
    InvalidModelChoiceError,
)
from critter_client.client.inference_client import InferenceClient
from critter_client.client.models import ClassificationResult, ModelChoice
from critter_client.client.options import ClientOptions
from critter_client.client.preview import PreviewRegistry
from critter_client.client.transport import create_http_client
from critter_client.client.view import ViewState

logger = logging.getLogger(__name__)

CLASSIFY_LABEL = "Classify Image"
CLASSIFYING_LABEL = "Classifying..."
EMPTY_RESULT_TEXT = "Select a model and image to see predictions"

# Outputs of every handler, in this order:
# session, preview, result label, result text, error banner, classify button
Outputs = tuple[Any, ...]


def result_to_label(result: ClassificationResult | None) -> dict[str, float]:
    """Map a result onto the ``{label: confidence}`` value gr.Label shows."""
    if result is None:
        return {}
    if not result.confidences:
        return {result.label: 1.0}
    return {entry.label: entry.confidence for entry in result.confidences}


def result_markdown(view: ViewState) -> str:
    """Describe the result panel, best guess in bold."""
    if view.result is None:
        return f"*{EMPTY_RESULT_TEXT}*"
    lines = [f"### {view.result.label}", "", "Confidence Scores:", ""]
    lines.extend(
        f"- **{row.text}**" if row.emphasised else f"- {row.text}"
        for row in view.confidence_rows
    )
    return "\n".join(lines)


class ClassifierApp:
    """Builds the Blocks layout and routes events to session controllers."""

    def __init__(self, options: ClientOptions) -> None:
        """Initialize shared collaborators for all sessions.

        Args:
            options: Configuration for the client and the asset location.

        """
        self.options = options
        self.registry = PreviewRegistry()
        self.inference_client = InferenceClient(
            create_http_client(options.host), options
        )
        self.asset_loader = ExampleAssetLoader(
            httpx.AsyncClient(follow_redirects=True), options.asset_base_url
        )
        self.examples = list(ExampleAsset)

    def new_controller(self) -> WorkflowController:
        """Create the controller for a new browser session."""
        return WorkflowController(
            self.inference_client,
            self.asset_loader,
            registry=self.registry,
            model=self.options.default_model,
        )

    def session(
        self, controller: WorkflowController | None
    ) -> WorkflowController:
        """Return the session controller, creating it on first use."""
        return controller if controller is not None else self.new_controller()

    @staticmethod
    def end_session(controller: WorkflowController | None) -> None:
        """Release the session's preview when Gradio drops its state."""
        if controller is not None:
            controller.close()

    def render(self, controller: WorkflowController) -> Outputs:
        """Translate the controller's view into component updates."""
        view = controller.current_view()

        preview: Any = None
        if controller.preview is not None:
            if controller.preview.revocable:
                image = self.registry.resolve(controller.preview.url)
                preview = image.data if image is not None else None
            else:
                preview = controller.preview.url

        return (
            controller,
            _decode_preview(preview),
            result_to_label(view.result) or None,
            result_markdown(view),
            gr.update(
                value=f"**Error:** {view.error}" if view.error else "",
                visible=view.error is not None,
            ),
            gr.update(
                value=CLASSIFYING_LABEL if view.loading else CLASSIFY_LABEL,
                interactive=view.can_classify,
            ),
        )

    def on_model_change(
        self, controller: WorkflowController | None, choice: str
    ) -> Outputs:
        """Handle a new selection in the model dropdown."""
        controller = self.session(controller)
        try:
            controller.set_model(choice)
        except InvalidModelChoiceError:
            logger.warning("Ignoring unsupported model choice %r", choice)
        return self.render(controller)

    def on_upload(
        self, controller: WorkflowController | None, data: bytes | None
    ) -> Outputs:
        """Handle a file picked in the upload control."""
        controller = self.session(controller)
        if data:
            try:
                controller.select_file(data)
            except InvalidImageError:
                gr.Warning("Please choose an image file.")
        return self.render(controller)

    async def on_classify(
        self, controller: WorkflowController | None
    ) -> AsyncIterator[Outputs]:
        """Classify the selected image, showing the loading state first."""
        controller = self.session(controller)
        task = asyncio.create_task(controller.classify())
        # Let classify() start so the first render shows it in flight
        await asyncio.sleep(0)
        yield self.render(controller)
        await task
        yield self.render(controller)

    def gallery_items(self) -> list[str]:
        """URLs of the example images, in gallery order."""
        return [self.asset_loader.url_for(asset) for asset in self.examples]

    async def on_example(
        self, controller: WorkflowController | None, evt: gr.SelectData
    ) -> AsyncIterator[Outputs]:
        """Load the clicked example and classify it."""
        controller = self.session(controller)
        await controller.select_example(self.examples[evt.index])
        yield self.render(controller)
        if controller.current_view().error is None:
            async for outputs in self.on_classify(controller):
                yield outputs

    def build(self) -> gr.Blocks:
        """Lay out the interface and wire up its events."""
        with gr.Blocks(title="Image Classifier") as demo:
            session = gr.State(None, delete_callback=self.end_session)
            gr.Markdown("# Image Classifier")

            with gr.Row():
                with gr.Column():
                    gr.Markdown("### Upload Image")
                    model = gr.Dropdown(
                        choices=ModelChoice.labels(),
                        value=self.options.default_model.value,
                        label="Select Model",
                    )
                    upload = gr.File(
                        label="Upload Image",
                        file_types=["image"],
                        type="binary",
                    )
                    preview = gr.Image(
                        label="Preview", interactive=False, height=200
                    )
                    classify = gr.Button(
                        CLASSIFY_LABEL, variant="primary", interactive=False
                    )
                    error = gr.Markdown(visible=False)

                with gr.Column():
                    label = gr.Label(label="Prediction Results")
                    details = gr.Markdown(f"*{EMPTY_RESULT_TEXT}*")

            gr.Markdown("### Example Images\nClick any image to classify it:")
            gallery = gr.Gallery(
                columns=6,
                height=160,
                allow_preview=False,
                show_label=False,
            )

            outputs = [session, preview, label, details, error, classify]
            model.change(
                self.on_model_change, inputs=[session, model], outputs=outputs
            )
            upload.upload(
                self.on_upload, inputs=[session, upload], outputs=outputs
            )
            classify.click(self.on_classify, inputs=[session], outputs=outputs)
            gallery.select(self.on_example, inputs=[session], outputs=outputs)
            demo.load(self.gallery_items, outputs=gallery)

        return demo


def _decode_preview(preview: bytes | str | None) -> Any:  # noqa: ANN401 - gr.Image value
    """Turn preview bytes into a PIL image; URLs are passed through."""
    if not isinstance(preview, bytes):
        return preview
    return Image.open(BytesIO(preview))


def build_app(options: ClientOptions | None = None) -> gr.Blocks:
    """Create the Gradio app, reading options from the environment if needed."""
    return ClassifierApp(options or ClientOptions.from_env()).build()


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s.%(msecs)03d %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    build_app().queue().launch()
