"""The closed set of remote models an image can be classified with."""

import enum

from critter_client.client.exceptions import InvalidModelChoiceError


class ModelChoice(enum.Enum):
    """Remote classification model, valued by the name the service expects."""

    CAT_VS_DOG = "Cat vs Dog"
    BEAR_CLASSIFIER = "Bear Classifier"

    @classmethod
    def default(cls) -> "ModelChoice":
        """Model selected when a session starts."""
        return cls.CAT_VS_DOG

    @classmethod
    def parse(cls, value: "ModelChoice | str") -> "ModelChoice":
        """Resolve a member, its wire value or its member name.

        Raises:
            InvalidModelChoiceError: If ``value`` names no supported model.

        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for choice in cls:
                if value in (choice.value, choice.name):
                    return choice
        msg = f"{InvalidModelChoiceError.default_message}: {value!r}"
        raise InvalidModelChoiceError(msg)

    @classmethod
    def labels(cls) -> list[str]:
        """Wire values of every model, in selector order."""
        return [choice.value for choice in cls]
