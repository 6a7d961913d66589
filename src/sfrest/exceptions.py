from __future__ import annotations

from typing import Any, Dict, Optional


class SalesforceError(Exception):
    """Base class for every failure raised by the client."""

    def __init__(self, message: str = ""):
        self.message = message
        super().__init__(message)


class AuthError(SalesforceError):
    """Raised when a resource call is made without a session, or login returns no token."""


class ValidationError(SalesforceError):
    """Raised when a caller argument is malformed; no request is sent."""


class MissingCredentialsError(ValidationError):
    """Raised when the required Salesforce env vars are not present."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__("Missing required environment variables: " + ", ".join(missing))


class TransportError(SalesforceError):
    """Network, TLS or timeout failure. The message is the underlying diagnostic."""


class ApiError(SalesforceError):
    """The server answered with an error status or an error body."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        request_headers: Optional[Dict[str, str]] = None,
        response_body: str = "",
        payload: Any = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.request_headers = dict(request_headers or {})
        self.response_body = response_body
        self.payload = payload

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"HTTP {self.status_code}: {self.message}"
