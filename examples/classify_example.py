#!/usr/bin/env python3
"""Example script driving a classification session end to end."""

import asyncio
import logging
import os
import sys
from pathlib import Path

import httpx

from critter_client.client.asset_loader import ExampleAsset, ExampleAssetLoader
from critter_client.client.controller import WorkflowController
from critter_client.client.inference_client import InferenceClient
from critter_client.client.models import ModelChoice
from critter_client.client.options import ClientOptions
from critter_client.client.transport import create_http_client
from critter_client.client.view import ViewState


def log_view(logger: logging.Logger, view: ViewState) -> None:
    """Log what the front end would render for ``view``."""
    if view.error:
        logger.error("Error: %s", view.error)
        return
    if view.result is None:
        logger.info("No prediction (%s)", view.request_state.value)
        return

    logger.info("Prediction: %s", view.result.label)
    for row in view.confidence_rows:
        logger.info("  %s%s", "* " if row.emphasised else "  ", row.text)


async def run_session(
    logger: logging.Logger,
    controller: WorkflowController,
    image_path: str | None = None,
) -> bool:
    """Classify an uploaded file, then every example with both models.

    Args:
        logger: Logger instance for output
        controller: The session controller to drive
        image_path: Path to an image file to classify (optional)

    Returns:
        True if every classification succeeded, False otherwise

    """
    succeeded = True

    if image_path and Path(image_path).exists():
        logger.info("\n=== Uploaded image: %s ===", image_path)
        controller.select_file(
            Path(image_path).read_bytes(), filename=Path(image_path).name
        )
        await controller.classify()
        log_view(logger, controller.current_view())
        succeeded = controller.current_view().error is None

    for model in ModelChoice:
        controller.set_model(model)
        for asset in ExampleAsset:
            logger.info("\n=== %s with %s ===", asset.value, model.value)
            await controller.select_example(asset)
            await controller.classify()

            view = controller.current_view()
            log_view(logger, view)
            succeeded = succeeded and view.error is None

    return succeeded


async def main() -> int:
    """Run the example against the configured Space."""
    logger = logging.getLogger(__name__)
    options = ClientOptions.from_env()
    logger.info("Connecting to %s", options.host)

    async with (
        InferenceClient(create_http_client(options.host), options) as client,
        httpx.AsyncClient(follow_redirects=True) as asset_http,
    ):
        loader = ExampleAssetLoader(asset_http, options.asset_base_url)
        with WorkflowController(
            client, loader, model=options.default_model
        ) as controller:
            try:
                success = await run_session(
                    logger, controller, os.getenv("TEST_IMAGE_PATH")
                )
            except Exception:
                logger.exception("Example session failed")
                return 1

    if not success:
        logger.error("Some classifications failed")
        return 1

    logger.info("\n=== All examples completed successfully! ===")
    return 0


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s.%(msecs)03d %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    sys.exit(asyncio.run(main()))
