"""Shared fixtures for the critter client tests."""

from unittest import mock

import pytest

from critter_client.client.asset_loader import ExampleAsset, ExampleAssetLoader
from critter_client.client.controller import WorkflowController
from critter_client.client.inference_client import InferenceClient
from critter_client.client.models import (
    ClassificationResult,
    Confidence,
    ImageData,
)
from critter_client.client.preview import PreviewRegistry
from tests.utils.fake_adapter import PendingInferenceClient
from tests.utils.image_generation import create_test_image

ASSET_BASE_URL = "https://assets.example.test/images"


@pytest.fixture
def png_bytes() -> bytes:
    """A small valid PNG image."""
    return create_test_image(seed=1)


@pytest.fixture
def other_png_bytes() -> bytes:
    """A second valid PNG image, distinct from ``png_bytes``."""
    return create_test_image(32, 32, seed=2)


@pytest.fixture
def dog_result() -> ClassificationResult:
    """The result the service returns for a dog photo."""
    return ClassificationResult(
        label="Dog",
        confidences=(
            Confidence(label="Dog", confidence=0.93),
            Confidence(label="Cat", confidence=0.07),
        ),
    )


@pytest.fixture
def mock_inference_client(dog_result: ClassificationResult) -> mock.Mock:
    """Inference client whose submit returns ``dog_result``."""
    client = mock.Mock(spec=InferenceClient)
    client.submit = mock.AsyncMock(return_value=dog_result)
    return client


@pytest.fixture
def pending_inference_client() -> PendingInferenceClient:
    """Inference client whose calls the test resolves by hand."""
    return PendingInferenceClient()


@pytest.fixture
def mock_asset_loader(png_bytes: bytes) -> mock.Mock:
    """Asset loader returning ``png_bytes`` for every asset."""
    loader = mock.Mock(spec=ExampleAssetLoader)
    real = ExampleAssetLoader(mock.Mock(), ASSET_BASE_URL)
    loader.url_for.side_effect = real.url_for

    async def load(asset: ExampleAsset | str) -> ImageData:
        resolved = ExampleAsset.parse(asset)
        return ImageData(png_bytes, filename=resolved.value)

    loader.load = mock.AsyncMock(side_effect=load)
    return loader


@pytest.fixture
def registry() -> PreviewRegistry:
    """A fresh preview registry."""
    return PreviewRegistry()


@pytest.fixture
def controller(
    mock_inference_client: mock.Mock,
    mock_asset_loader: mock.Mock,
    registry: PreviewRegistry,
) -> WorkflowController:
    """Controller wired to mocked collaborators."""
    return WorkflowController(
        mock_inference_client, mock_asset_loader, registry=registry
    )
