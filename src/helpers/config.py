"""Configuration management and environment variable utilities."""

import os

from dotenv import load_dotenv

from src.helpers.constants import DEFAULT_GRAFANA_URL


# Load environment variables from .env file
load_dotenv()


def get_required_env(key: str) -> str:
    """Get a required environment variable.

    Args:
        key: Environment variable name

    Returns:
        Environment variable value

    Raises:
        ValueError: If the environment variable is not set

    Example:
        ```python
        from src.helpers.config import get_required_env

        api_key = get_required_env("GRAFANA_AUTH")
        ```
    """
    value = os.getenv(key)
    if not value:
        msg = f"{key} environment variable is not set"
        raise ValueError(msg)
    return value


def get_optional_env(key: str, default: str | None = None) -> str | None:
    """Get an optional environment variable with a default value.

    Args:
        key: Environment variable name
        default: Default value if not set

    Returns:
        Environment variable value or default
    """
    return os.getenv(key, default)


def get_optional_int_env(key: str, default: int | None = None) -> int | None:
    """Get an optional integer environment variable.

    Empty values count as unset.

    Raises:
        ValueError: If the value is set but is not an integer
    """
    value = os.getenv(key)
    if not value:
        return default
    try:
        return int(value)
    except ValueError as e:
        msg = f"{key} must be an integer, got {value!r}"
        raise ValueError(msg) from e


def get_grafana_url(url: str | None = None) -> str:
    """Get the Grafana base URL from parameter, environment or default.

    Args:
        url: Optional URL to use directly

    Returns:
        Grafana base URL

    Example:
        ```python
        from src.helpers.config import get_grafana_url

        # GRAFANA_URL, falling back to http://localhost:3001/
        url = get_grafana_url()

        # Or provide explicitly
        url = get_grafana_url("https://grafana.example.com")
        ```
    """
    if url:
        return url

    return os.getenv("GRAFANA_URL") or DEFAULT_GRAFANA_URL


def get_grafana_auth(credential: str | None = None) -> str:
    """Get the Grafana credential from parameter or environment.

    The credential is either an API key/service account token or a
    ``username:password`` pair. An empty string means no authentication.

    Args:
        credential: Optional credential to use directly

    Returns:
        Credential string, possibly empty
    """
    if credential is not None:
        return credential

    return os.getenv("GRAFANA_AUTH", "")


__all__ = [
    "get_grafana_auth",
    "get_grafana_url",
    "get_optional_env",
    "get_optional_int_env",
    "get_required_env",
]
