"""Async client for the Grafana dashboard HTTP API."""

from types import TracebackType
from typing import Any, Self
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from src.grafana.auth import Credential, describe_credential, parse_credential
from src.grafana.errors import (
    DecodeError,
    InvalidURLError,
    PreconditionFailureError,
    TransportError,
)
from src.grafana.models import DashboardPayload, GrafanaResponse
from src.helpers.config import get_grafana_auth, get_grafana_url
from src.helpers.constants import (
    DASHBOARD_BY_UID_PATH,
    DASHBOARDS_DB_PATH,
    DEFAULT_FOLDER_ID,
    DEFAULT_TIMEOUT,
)
from src.helpers.http import create_http_client, decode_json_object
from src.helpers.logging import get_logger


logger = get_logger(__name__)


def parse_base_url(base_url: str) -> httpx.URL:
    """Parse and validate a Grafana base URL.

    Raises:
        InvalidURLError: If the URL cannot be parsed or is not absolute
    """
    try:
        url = httpx.URL(base_url)
    except (httpx.InvalidURL, TypeError) as e:
        msg = f"Invalid Grafana URL {base_url!r}: {e}"
        raise InvalidURLError(msg) from e

    if url.scheme not in {"http", "https"} or not url.host:
        msg = f"Invalid Grafana URL {base_url!r}: expected http(s)://host[:port][/path]"
        raise InvalidURLError(msg)

    return url


class GrafanaClient:
    """Client for creating and deleting Grafana dashboards.

    Example:
        ```python
        async with GrafanaClient("http://localhost:3001/", "admin:admin") as client:
            created = await client.set_dashboard(model, overwrite=True)
            await client.delete_dashboard_by_uid(created.require_uid())
        ```
    """

    def __init__(
        self,
        base_url: str,
        credential: str = "",
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Grafana instance URL, may include a path prefix
            credential: ``username:password`` for basic auth, an API key,
                or an empty string for no authentication
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests use MockTransport)

        Raises:
            InvalidURLError: If ``base_url`` is not an absolute http(s) URL
            InvalidCredentialFormatError: If a basic auth credential is malformed
        """
        self.base_url = parse_base_url(base_url)
        self.credential: Credential = parse_credential(credential)

        self._client = create_http_client(
            str(self.base_url),
            timeout=timeout,
            auth=self.credential.httpx_auth() if self.credential else None,
            headers=self.credential.headers() if self.credential else None,
            transport=transport,
        )
        logger.debug(
            "Grafana client for %s (auth: %s)",
            self.base_url,
            describe_credential(self.credential),
        )

    @classmethod
    def from_env(
        cls,
        base_url: str | None = None,
        credential: str | None = None,
        **kwargs: Any,
    ) -> Self:
        """Build a client from arguments, falling back to GRAFANA_URL/GRAFANA_AUTH."""
        return cls(get_grafana_url(base_url), get_grafana_auth(credential), **kwargs)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def _request(
        self, method: str, path: str, *, json: dict[str, Any] | None = None
    ) -> GrafanaResponse:
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.DecodingError as e:
            msg = f"Cannot decode response body: {e}"
            raise DecodeError(msg) from e
        except httpx.RequestError as e:
            msg = f"{method} {self._client.base_url.join(path)} failed: {e}"
            raise TransportError(msg) from e

        data = decode_json_object(response)
        try:
            result = GrafanaResponse.model_validate(data)
        except ValidationError as e:
            msg = f"Unexpected Grafana response shape: {e}"
            raise DecodeError(msg, status_code=response.status_code) from e

        result._status_code = response.status_code
        if response.is_error:
            logger.warning("Grafana error: %s", result.message or "no message")
        return result

    async def set_dashboard(
        self,
        dashboard: dict[str, Any],
        *,
        folder_id: int = DEFAULT_FOLDER_ID,
        folder_uid: str | None = None,
        message: str = "",
        overwrite: bool = False,
    ) -> GrafanaResponse:
        """Create or update a dashboard.

        Args:
            dashboard: Dashboard JSON model
            folder_id: Target folder ID (0 for General)
            folder_uid: Target folder UID, sent only when set
            message: Version history message
            overwrite: Replace an existing dashboard with the same uid/title

        Returns:
            Parsed Grafana response

        Raises:
            TransportError: If the request could not be sent
            DecodeError: If the response is not a JSON object of the expected shape
        """
        payload = DashboardPayload(
            dashboard=dashboard,
            folder_id=folder_id,
            folder_uid=folder_uid,
            message=message,
            overwrite=overwrite,
        )
        logger.info(
            "Setting dashboard %r in folder %s",
            dashboard.get("title"),
            folder_uid or folder_id,
        )
        return await self._request(
            "POST", DASHBOARDS_DB_PATH, json=payload.to_request_body()
        )

    async def delete_dashboard_by_uid(self, uid: str) -> GrafanaResponse:
        """Delete a dashboard by its UID.

        Raises:
            PreconditionFailureError: If ``uid`` is empty; nothing is sent
            TransportError: If the request could not be sent
            DecodeError: If the response is not a JSON object of the expected shape
        """
        if not uid:
            msg = "Dashboard uid is required to delete a dashboard"
            raise PreconditionFailureError(msg)

        logger.info("Deleting dashboard %s", uid)
        path = DASHBOARD_BY_UID_PATH.format(uid=quote(uid, safe=""))
        return await self._request("DELETE", path)


__all__ = ["GrafanaClient", "parse_base_url"]
