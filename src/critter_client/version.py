"""Single point of truth for the version of the critter_client package."""

import importlib.metadata

__version__ = importlib.metadata.version("critter_client")
