"""Options object for the critter client."""

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from critter_client.client.consts import (
    DEFAULT_API_NAME,
    DEFAULT_ASSET_BASE_URL,
    DEFAULT_HOST,
    DEFAULT_TIMEOUT,
    ENV_PREFIX,
)
from critter_client.client.exceptions import (
    InvalidHostError,
    InvalidOptionsError,
)
from critter_client.client.models import ModelChoice


@dataclass
class ClientOptions:
    """Options for configuring the critter client behavior.

    Attributes:
        host: Base URL of the Gradio Space serving the classifier.
            Defaults to the public "shawizir/fastai" Space.
        api_name: Name of the endpoint to call on the Space.
            Defaults to "/classify_image".
        timeout: Upper bound in seconds for one complete classification,
            covering upload, submission and waiting for the result.
            Defaults to 30 seconds.
        asset_base_url: Base URL the example images are fetched from.
        default_model: Model selected when a session starts.

    """

    host: str = DEFAULT_HOST
    api_name: str = DEFAULT_API_NAME
    timeout: float = DEFAULT_TIMEOUT
    asset_base_url: str = DEFAULT_ASSET_BASE_URL
    default_model: ModelChoice = field(default_factory=ModelChoice.default)

    def __post_init__(self) -> None:
        """Validate and normalise the options."""
        if not self.host:
            raise InvalidHostError(InvalidHostError.default_message)
        if self.timeout <= 0:
            msg = f"{InvalidOptionsError.default_message}: timeout must be > 0"
            raise InvalidOptionsError(msg)
        if not self.api_name:
            msg = f"{InvalidOptionsError.default_message}: api_name is empty"
            raise InvalidOptionsError(msg)

        self.host = self.host.rstrip("/")
        self.asset_base_url = self.asset_base_url.rstrip("/")
        self.api_name = "/" + self.api_name.lstrip("/")
        self.default_model = ModelChoice.parse(self.default_model)

    @classmethod
    def from_env(cls) -> "ClientOptions":
        """Build options from ``CRITTER_*`` environment variables.

        A ``.env`` file in the working directory is loaded first. Variables
        that are not set fall back to the defaults.
        """
        load_dotenv()

        timeout = os.getenv(f"{ENV_PREFIX}TIMEOUT")
        try:
            parsed_timeout = float(timeout) if timeout else DEFAULT_TIMEOUT
        except ValueError as e:
            msg = (
                f"{InvalidOptionsError.default_message}: "
                f"{ENV_PREFIX}TIMEOUT={timeout!r} is not a number"
            )
            raise InvalidOptionsError(msg) from e

        return cls(
            host=os.getenv(f"{ENV_PREFIX}HOST", DEFAULT_HOST),
            api_name=os.getenv(f"{ENV_PREFIX}API_NAME", DEFAULT_API_NAME),
            timeout=parsed_timeout,
            asset_base_url=os.getenv(
                f"{ENV_PREFIX}ASSET_BASE_URL", DEFAULT_ASSET_BASE_URL
            ),
            default_model=ModelChoice.parse(
                os.getenv(
                    f"{ENV_PREFIX}DEFAULT_MODEL", ModelChoice.default().value
                )
            ),
        )
