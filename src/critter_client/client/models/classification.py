"""Classification results returned by the remote service.

The service answers with a label payload of the form::

    {
        "label": "Dog",
        "confidences": [
            {"label": "Dog", "confidence": 0.93},
            {"label": "Cat", "confidence": 0.07},
        ],
    }

These classes hold that payload in an immutable, validated form.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from critter_client.client.exceptions import InvalidResponseError


@dataclass(frozen=True)
class Confidence:
    """A single class label with the probability assigned to it.

    Attributes:
        label: The class label.
        confidence: Probability in the closed interval [0, 1].

    """

    label: str
    confidence: float

    @property
    def percent(self) -> float:
        """Confidence expressed as a percentage."""
        return self.confidence * 100


@dataclass(frozen=True)
class ClassificationResult:
    """Outcome of one successful classification.

    Attributes:
        label: The label the service chose.
        confidences: Per-class confidences ordered by descending confidence.
            Index 0 is the best guess.

    """

    label: str
    confidences: tuple[Confidence, ...] = ()

    @property
    def best(self) -> Confidence | None:
        """The highest ranked confidence entry, if any were returned."""
        return self.confidences[0] if self.confidences else None

    @classmethod
    def from_payload(cls, payload: Any) -> "ClassificationResult":  # noqa: ANN401 - decoded JSON
        """Build a result from a decoded label payload.

        Args:
            payload: The decoded JSON value the service returned.

        Returns:
            The validated result with confidences sorted best first.

        Raises:
            InvalidResponseError: If the label is missing or empty, or any
                confidence entry is malformed or outside [0, 1].

        """
        if not isinstance(payload, Mapping):
            msg = f"{InvalidResponseError.default_message}: expected object"
            raise InvalidResponseError(msg)

        label = payload.get("label")
        if not isinstance(label, str) or not label:
            msg = f"{InvalidResponseError.default_message}: missing label"
            raise InvalidResponseError(msg)

        raw_confidences = payload.get("confidences") or []
        if not isinstance(raw_confidences, list):
            msg = (
                f"{InvalidResponseError.default_message}: "
                "confidences must be a list"
            )
            raise InvalidResponseError(msg)

        confidences = [_parse_confidence(entry) for entry in raw_confidences]
        confidences.sort(key=lambda entry: entry.confidence, reverse=True)
        return cls(label=label, confidences=tuple(confidences))


def _parse_confidence(entry: Any) -> Confidence:  # noqa: ANN401 - decoded JSON
    """Validate one ``{"label", "confidence"}`` entry."""
    if not isinstance(entry, Mapping):
        msg = f"{InvalidResponseError.default_message}: bad confidence entry"
        raise InvalidResponseError(msg)

    label = entry.get("label")
    value = entry.get("confidence")
    if (
        not isinstance(label, str)
        or isinstance(value, bool)
        or not isinstance(value, int | float)
    ):
        msg = f"{InvalidResponseError.default_message}: bad confidence entry"
        raise InvalidResponseError(msg)

    value = float(value)
    if math.isnan(value) or not 0.0 <= value <= 1.0:
        msg = (
            f"{InvalidResponseError.default_message}: "
            f"confidence {value} for {label!r} outside [0, 1]"
        )
        raise InvalidResponseError(msg)

    return Confidence(label=label, confidence=value)
