"""Errors raised by the Grafana client and the datasource rewriter."""


class GrafanaError(Exception):
    """Base class for every error raised by this package."""


class InvalidURLError(GrafanaError, ValueError):
    """The Grafana base URL cannot be parsed or is not absolute."""


class InvalidCredentialFormatError(GrafanaError, ValueError):
    """A basic auth credential is not of the form ``username:password``."""


class ParseError(GrafanaError, ValueError):
    """A dashboard document is not a valid JSON object."""


class TransportError(GrafanaError):
    """The request never produced a response (connection, DNS, timeout)."""


class DecodeError(GrafanaError):
    """The server answered with a body that is not the expected JSON shape."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class PreconditionFailureError(GrafanaError):
    """A value needed for the next step is missing, so nothing was sent."""


__all__ = [
    "DecodeError",
    "GrafanaError",
    "InvalidCredentialFormatError",
    "InvalidURLError",
    "ParseError",
    "PreconditionFailureError",
    "TransportError",
]
