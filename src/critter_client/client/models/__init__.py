"""Package containing data models for the critter client.

This package contains the data models used to hold selected images, the model
choice and the classification results returned by the remote service.
"""

from .classification import ClassificationResult, Confidence
from .image_data import ImageData
from .model_choice import ModelChoice

__all__ = ["ClassificationResult", "Confidence", "ImageData", "ModelChoice"]
