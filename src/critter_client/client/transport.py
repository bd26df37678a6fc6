"""HTTP client creation utilities for the critter client."""

import httpx

from critter_client.client.exceptions import InvalidHostError


def create_http_client(
    host: str, *, headers: dict[str, str] | None = None
) -> httpx.AsyncClient:
    """Create the HTTP client used to talk to the classification Space.

    Time budgets are enforced per operation by the callers, so the client
    itself is created without a default timeout.

    Args:
        host: Base URL of the Space, e.g. ``https://owner-space.hf.space``
        headers: Optional extra headers sent with every request

    Returns:
        An ``httpx.AsyncClient`` rooted at ``host``

    Raises:
        InvalidHostError: If host is empty

    """
    if not host:
        raise InvalidHostError(InvalidHostError.default_message)

    return httpx.AsyncClient(
        base_url=host.rstrip("/"),
        headers=headers,
        timeout=None,
        follow_redirects=True,
    )
