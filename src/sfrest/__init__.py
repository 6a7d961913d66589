from __future__ import annotations

import logging
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("sfrest")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

from .api import SalesforceAPI, SFConfig
from .exceptions import (
    ApiError,
    AuthError,
    MissingCredentialsError,
    SalesforceError,
    TransportError,
    ValidationError,
)
from .results import ApiResult, EmptySuccess, Failure, NotModified, ResultShape, Success
from .session import Session

# Keep library modules quiet unless the app configures logging:
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "SalesforceAPI",
    "SFConfig",
    "Session",
    "ResultShape",
    "ApiResult",
    "Success",
    "EmptySuccess",
    "NotModified",
    "Failure",
    "SalesforceError",
    "AuthError",
    "ValidationError",
    "MissingCredentialsError",
    "TransportError",
    "ApiError",
]
