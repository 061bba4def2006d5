"""Credential parsing for the Grafana HTTP API.

A single string selects the authentication mode:

- ``""``: no authentication
- ``"username:password"``: HTTP basic auth
- anything else: API key or service account token, sent as a bearer token
"""

from typing import Literal, TypeAlias

import httpx
from pydantic import BaseModel, ConfigDict, Field

from src.grafana.errors import InvalidCredentialFormatError
from src.helpers.constants import BASIC_AUTH_SEPARATOR


class TokenCredential(BaseModel):
    """Grafana API key or service account token."""

    token: str = Field(..., min_length=1, description="Bearer token")

    model_config = ConfigDict(frozen=True)

    @property
    def mode(self) -> Literal["token"]:
        """Authentication mode name."""
        return "token"

    def headers(self) -> dict[str, str]:
        """Headers to send with every request."""
        return {"Authorization": f"Bearer {self.token}"}

    def httpx_auth(self) -> httpx.Auth | None:
        """Token auth travels in a header, not in an httpx auth flow."""
        return None


class BasicCredential(BaseModel):
    """Username and password for HTTP basic auth."""

    username: str = Field(..., min_length=1, description="Grafana username")
    password: str = Field(..., min_length=1, description="Grafana password")

    model_config = ConfigDict(frozen=True)

    @property
    def mode(self) -> Literal["basic"]:
        """Authentication mode name."""
        return "basic"

    def headers(self) -> dict[str, str]:
        """Basic auth is applied by httpx, no extra headers."""
        return {}

    def httpx_auth(self) -> httpx.Auth | None:
        """httpx auth flow adding the basic ``Authorization`` header."""
        return httpx.BasicAuth(self.username, self.password)

    def __repr__(self) -> str:
        return f"BasicCredential(username={self.username!r}, password='***')"


Credential: TypeAlias = TokenCredential | BasicCredential | None


def parse_credential(value: str) -> Credential:
    """Parse a credential string into its authentication mode.

    Args:
        value: Empty string, API token, or ``username:password``

    Returns:
        None for no authentication, otherwise the parsed credential

    Raises:
        InvalidCredentialFormatError: If ``value`` contains the separator but
            does not split into exactly two non-empty parts

    Example:
        ```python
        parse_credential("admin:secret")  # BasicCredential(username="admin", ...)
        parse_credential("glsa_abc123")  # TokenCredential(token="glsa_abc123")
        parse_credential("")  # None
        ```
    """
    if not value:
        return None

    if BASIC_AUTH_SEPARATOR not in value:
        return TokenCredential(token=value)

    parts = value.split(BASIC_AUTH_SEPARATOR)
    if len(parts) != 2 or not all(parts):
        msg = (
            "given basic auth format is invalid. "
            "expected format: <username>:<password>"
        )
        raise InvalidCredentialFormatError(msg)

    username, password = parts
    return BasicCredential(username=username, password=password)


def describe_credential(credential: Credential) -> str:
    """Human readable auth mode that never includes the secret."""
    match credential:
        case None:
            return "none"
        case TokenCredential():
            return "bearer token"
        case BasicCredential(username=username):
            return f"basic auth as {username}"


__all__ = [
    "BasicCredential",
    "Credential",
    "TokenCredential",
    "describe_credential",
    "parse_credential",
]
