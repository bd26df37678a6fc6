"""Render-ready snapshot of a classification session."""

import enum
from dataclasses import dataclass

from critter_client.client.models import (
    ClassificationResult,
    Confidence,
    ModelChoice,
)


class RequestState(enum.Enum):
    """Where the current classification attempt stands."""

    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


def derive_request_state(
    *,
    loading: bool,
    result: ClassificationResult | None,
    error: str | None,
) -> RequestState:
    """Derive the request state from the stored session fields.

    Raises:
        RuntimeError: If both a result and an error are set.

    """
    if result is not None and error is not None:
        msg = "Result and error cannot both be set"
        raise RuntimeError(msg)
    if loading:
        return RequestState.IN_FLIGHT
    if result is not None:
        return RequestState.SUCCEEDED
    if error is not None:
        return RequestState.FAILED
    return RequestState.IDLE


@dataclass(frozen=True)
class ConfidenceRow:
    """One line of the ranked confidence list."""

    label: str
    percent: float
    text: str
    emphasised: bool


def format_confidence(entry: Confidence) -> str:
    """Format an entry as ``"<label>: <percent>%"`` to one decimal place."""
    return f"{entry.label}: {entry.percent:.1f}%"


def confidence_rows(result: ClassificationResult) -> list[ConfidenceRow]:
    """Rank confidences for display, emphasising the best guess."""
    return [
        ConfidenceRow(
            label=entry.label,
            percent=entry.percent,
            text=format_confidence(entry),
            emphasised=index == 0,
        )
        for index, entry in enumerate(result.confidences)
    ]


@dataclass(frozen=True)
class ViewState:
    """Everything the front end needs to draw the session.

    Attributes:
        preview_url: Display reference of the selected image, if any.
        model: The selected model.
        loading: Whether a classification is in flight.
        error: Error banner text, if any.
        result: The latest classification result, if any.
        has_image: Whether an image is selected.

    """

    preview_url: str | None
    model: ModelChoice
    loading: bool
    error: str | None
    result: ClassificationResult | None
    has_image: bool = False

    @property
    def request_state(self) -> RequestState:
        """The request state derived from this snapshot."""
        return derive_request_state(
            loading=self.loading, result=self.result, error=self.error
        )

    @property
    def can_classify(self) -> bool:
        """Whether the classify action should be enabled."""
        return self.has_image and not self.loading

    @property
    def confidence_rows(self) -> list[ConfidenceRow]:
        """Ranked confidence rows for the current result."""
        if self.result is None:
            return []
        return confidence_rows(self.result)
