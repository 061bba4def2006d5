"""Pydantic models for the Grafana dashboard API."""

from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from src.grafana.errors import PreconditionFailureError
from src.helpers.constants import DEFAULT_FOLDER_ID


class DashboardPayload(BaseModel):
    """Request body for ``POST /api/dashboards/db``."""

    dashboard: dict[str, Any] = Field(..., description="Dashboard JSON model")
    folder_id: int = Field(
        default=DEFAULT_FOLDER_ID,
        description="Grafana folder ID (0 for General)",
        alias="folderId",
    )
    folder_uid: str | None = Field(
        default=None,
        description="Grafana folder UID, takes precedence over folderId",
        alias="folderUid",
    )
    message: str = Field(default="", description="Version history message")
    overwrite: bool = Field(
        default=False,
        description="Replace an existing dashboard with the same uid or title",
    )

    model_config = ConfigDict(populate_by_name=True)

    def to_request_body(self) -> dict[str, Any]:
        """Serialize with Grafana's camelCase names, omitting an unset folder UID."""
        return self.model_dump(by_alias=True, exclude_none=True)


class GrafanaResponse(BaseModel):
    """Response from the Grafana dashboard API.

    Grafana only includes the fields relevant to the call (a delete answers
    with ``title``/``message``/``id``, an error with ``message`` only), so
    every field is optional. Use :meth:`require_uid` before addressing the
    dashboard again.
    """

    id: int | None = Field(default=None, description="Dashboard numeric ID")
    uid: str | None = Field(default=None, description="Dashboard unique identifier")
    url: str | None = Field(default=None, description="Dashboard URL path")
    title: str | None = Field(default=None, description="Dashboard title")
    message: str | None = Field(default=None, description="Server message")
    status: str | None = Field(default=None, description="Response status")
    version: int | None = Field(default=None, description="Dashboard version")
    slug: str | None = Field(default=None, description="Dashboard slug")

    model_config = ConfigDict(extra="allow")
    _status_code: int | None = PrivateAttr(default=None)

    @property
    def status_code(self) -> int | None:
        """HTTP status the response arrived with, if it came from a request."""
        return self._status_code

    @property
    def is_success(self) -> bool:
        return self._status_code is None or 200 <= self._status_code < 300

    def require_uid(self) -> str:
        """Return the dashboard UID.

        Raises:
            PreconditionFailureError: If the server did not return a UID
        """
        if not self.uid:
            detail = f": {self.message}" if self.message else ""
            msg = f"Grafana response has no dashboard uid{detail}"
            raise PreconditionFailureError(msg)
        return self.uid

    def require_success(self, action: str) -> Self:
        """Return the response if Grafana answered with a 2xx status.

        Args:
            action: What was attempted, used in the error message

        Raises:
            PreconditionFailureError: If the status was not 2xx
        """
        if not self.is_success:
            detail = f": {self.message}" if self.message else ""
            msg = f"Failed to {action} (HTTP {self._status_code}){detail}"
            raise PreconditionFailureError(msg)
        return self


__all__ = ["DashboardPayload", "GrafanaResponse"]
