"""HTTP plumbing shared by the service adapters."""

import logging
from typing import Any

import httpx

from time_entry_sync.exceptions import AuthenticationError, FetchError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


async def send(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    service: str,
    **kwargs: Any,
) -> httpx.Response:
    """Send a request and translate failures into sync errors.

    Args:
        client: Client to send with.
        method: HTTP method.
        url: URL, relative to the client's base URL.
        service: Service name used in error messages.
        **kwargs: Passed to httpx.AsyncClient.request.

    Returns:
        The successful response.

    Raises:
        AuthenticationError: On HTTP 401 or 403.
        FetchError: On any other HTTP or transport error.
    """
    try:
        response = await client.request(method, url, **kwargs)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        status = e.response.status_code
        if status in (401, 403):
            raise AuthenticationError(
                f"{service} rejected the credentials (HTTP {status})", service
            ) from e
        raise FetchError(f"{service} request failed with HTTP {status}", service) from e
    except httpx.HTTPError as e:
        raise FetchError(f"Could not reach {service}: {e}", service) from e

    logger.debug(f"{method} {response.request.url} -> {response.status_code}")
    return response
