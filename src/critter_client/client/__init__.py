"""Critter Client.

This module provides a client and session controller for classifying images
with a remote Gradio classification Space.
"""

from critter_client.client.asset_loader import ExampleAsset, ExampleAssetLoader
from critter_client.client.controller import RequestToken, WorkflowController
from critter_client.client.exceptions import (
    AssetLoadError,
    CritterError,
    InferenceError,
    InvalidHostError,
    InvalidImageError,
    InvalidModelChoiceError,
    InvalidOptionsError,
    InvalidResponseError,
)
from critter_client.client.inference_client import InferenceClient
from critter_client.client.options import ClientOptions
from critter_client.client.preview import PreviewHandle, PreviewRegistry
from critter_client.client.transport import create_http_client
from critter_client.client.view import RequestState, ViewState

__all__ = [
    "AssetLoadError",
    "ClientOptions",
    "CritterError",
    "ExampleAsset",
    "ExampleAssetLoader",
    "InferenceClient",
    "InferenceError",
    "InvalidHostError",
    "InvalidImageError",
    "InvalidModelChoiceError",
    "InvalidOptionsError",
    "InvalidResponseError",
    "PreviewHandle",
    "PreviewRegistry",
    "RequestState",
    "RequestToken",
    "ViewState",
    "WorkflowController",
    "create_http_client",
]
