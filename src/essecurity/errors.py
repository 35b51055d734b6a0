"""Error hierarchy for essecurity.

Every failure surfaced to the host is a :class:`ProviderError` carrying a
``kind`` that names its category. Hosts that expect diagnostics rather than
exceptions call :meth:`ProviderError.to_diagnostic`.

Subclass hierarchy::

    ProviderError
    +-- ConfigurationError   (configuration)
    +-- TransportError       (transport)
    +-- RemoteAPIError       (remote_api)
    +-- ResponseDecodeError  (response_decode)
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Diagnostic:
    """A host-facing report of a failed operation."""

    severity: str
    summary: str
    detail: str
    kind: str

    def __str__(self) -> str:
        return f"{self.summary}: {self.detail}"


class ProviderError(Exception):
    """Base exception for all provider errors.

    Args:
        message: Human-readable error description.
    """

    kind: str = "provider"
    summary: str = "Provider Error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_diagnostic(self) -> Diagnostic:
        return Diagnostic(
            severity="error",
            summary=self.summary,
            detail=self.message,
            kind=self.kind,
        )


class ConfigurationError(ProviderError):
    """Raised when resource or provider attributes cannot be decoded.

    No remote call has been made when this is raised.
    """

    kind = "configuration"
    summary = "Configuration Error"


class TransportError(ProviderError):
    """Raised on network-level failures (connection refused, timeout, TLS)."""

    kind = "transport"
    summary = "API Error"


class RemoteAPIError(ProviderError):
    """Raised when the cluster answers with a non-success status.

    Args:
        status_code: HTTP status returned by the cluster.
        purpose: What the request was doing, e.g. ``"creating API key"``.
        response_text: Leading part of the response body, if any.
    """

    kind = "remote_api"
    summary = "API Error"

    def __init__(
        self, status_code: int, purpose: str, response_text: Optional[str] = None
    ):
        message = f"[{status_code}] Error {purpose}"
        if response_text:
            message = f"{message}: {response_text}"
        super().__init__(message)
        self.status_code = status_code
        self.purpose = purpose
        self.response_text = response_text


class ResponseDecodeError(ProviderError):
    """Raised when a successful response does not have the expected shape."""

    kind = "response_decode"
    summary = "JSON Decode Error"


def format_error(error: ProviderError) -> str:
    """Render a provider error as the text returned to MCP clients."""
    diagnostic = error.to_diagnostic()
    return f"Error: [{diagnostic.kind}] {diagnostic}"
