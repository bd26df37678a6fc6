"""Base classes for all critter client exceptions."""


class CritterError(Exception):
    """Base class for all critter client exceptions."""


class InvalidHostError(CritterError):
    """Raised when the host is invalid."""

    default_message = "host cannot be empty"


class InvalidOptionsError(CritterError):
    """Raised when client options fail validation."""

    default_message = "Invalid client options"


class InvalidModelChoiceError(CritterError, ValueError):
    """Raised when a value is not one of the supported model choices."""

    default_message = "Unsupported model choice"


class InvalidImageError(CritterError, ValueError):
    """Raised when bytes supplied as an image are not a recognised image."""

    default_message = "Data is not a supported image"


class InferenceError(CritterError):
    """Raised when a classification request fails for any reason.

    Connection failures, exceeded time budgets, error statuses and malformed
    responses all surface as this single exception type. The underlying cause
    is chained for logging but callers should not branch on it.
    """

    default_message = "Classification request failed"


class InvalidResponseError(InferenceError):
    """Raised when the response payload is invalid."""

    default_message = "Invalid response"


class AssetLoadError(CritterError):
    """Raised when an example asset cannot be retrieved or decoded."""

    default_message = "Failed to load example asset"
