"""Constants shared across the critter client."""

DEFAULT_HOST = "https://shawizir-fastai.hf.space"
DEFAULT_API_NAME = "/classify_image"
DEFAULT_ASSET_BASE_URL = (
    "https://huggingface.co/spaces/shawizir/fastai/resolve/main/images"
)

# Upper bound for one complete inference call, in seconds
DEFAULT_TIMEOUT = 30.0

# Budget for fetching a single example asset, in seconds
ASSET_FETCH_TIMEOUT = 10.0

ASSET_LOAD_ERROR_MESSAGE = "Failed to load example image"
CLASSIFY_ERROR_MESSAGE = "Error classifying image. Please try again."

ENV_PREFIX = "CRITTER_"
