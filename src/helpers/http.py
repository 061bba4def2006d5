"""HTTP client utilities and helpers."""

import json

from typing import Any

import httpx

from src.grafana.errors import DecodeError
from src.helpers.constants import DEFAULT_TIMEOUT
from src.helpers.http_models import JsonObject
from src.helpers.logging import get_logger


logger = get_logger(__name__)


def create_http_client(
    base_url: str,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    auth: httpx.Auth | None = None,
    headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    **kwargs: Any,
) -> httpx.AsyncClient:
    """Create a configured httpx AsyncClient.

    Args:
        base_url: Base URL that relative request paths are joined onto
        timeout: Default timeout in seconds (default: DEFAULT_TIMEOUT)
        auth: Optional httpx auth flow applied to every request
        headers: Extra headers sent with every request
        transport: Optional transport, e.g. ``httpx.MockTransport`` in tests
        **kwargs: Additional httpx.AsyncClient kwargs

    Returns:
        Configured AsyncClient instance

    Example:
        ```python
        from src.helpers.http import create_http_client

        async with create_http_client("http://localhost:3001/") as client:
            response = await client.get("api/health")
        ```
    """
    return httpx.AsyncClient(
        base_url=base_url,
        timeout=timeout,
        auth=auth,
        headers={"Accept": "application/json", **(headers or {})},
        transport=transport,
        **kwargs,
    )


def decode_json_object(response: httpx.Response) -> JsonObject:
    """Decode a response body that must be a JSON object.

    HTTP error statuses are not raised here; the body is decoded either way
    and the status is logged so callers can inspect the server message.

    Args:
        response: Response to decode

    Returns:
        Parsed JSON object

    Raises:
        DecodeError: If the body is not valid JSON or not an object
    """
    if response.is_error:
        logger.warning(
            "%s %s returned HTTP %d",
            response.request.method,
            response.request.url,
            response.status_code,
        )

    try:
        data = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        body = response.text[:100] if response.text else ""
        msg = f"Response is not valid JSON (HTTP {response.status_code}): {body!r}"
        raise DecodeError(msg, status_code=response.status_code) from e

    if not isinstance(data, dict):
        msg = (
            f"Expected a JSON object (HTTP {response.status_code}), "
            f"got {type(data).__name__}"
        )
        raise DecodeError(msg, status_code=response.status_code)

    return data


__all__ = [
    "create_http_client",
    "decode_json_object",
]
