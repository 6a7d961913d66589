"""Map an HTTP status and body onto a result variant or an :class:`ApiError`.

Dispatch order:

=================  ====================  ===============================
status             empty body            non-empty body
=================  ====================  ===============================
304                NotModified           decoded as Success
200/201/204/300    EmptySuccess          decoded as Success
anything else      ApiError("")          ApiError(error_description or raw body)
=================  ====================  ===============================
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Mapping, Optional

from .exceptions import ApiError
from .results import (
    NOT_MODIFIED_MESSAGE,
    Decoder,
    EmptySuccess,
    NotModified,
    ResultShape,
    Success,
    decoder_for,
)

_logger = logging.getLogger(__name__)

SUCCESS_STATUSES = frozenset({200, 201, 204, 300})
NOT_MODIFIED_STATUS = 304


def mask_headers(headers: Optional[Mapping[str, str]]) -> Dict[str, str]:
    out = {}
    for key, value in (headers or {}).items():
        if key.lower() == "authorization":
            value = "Bearer ***"
        out[key] = value
    return out


def _error_from_body(status_code: int, body: str, request_headers: Dict[str, str]) -> ApiError:
    payload: Any = None
    message = body
    if body:
        try:
            payload = json.loads(body)
        except ValueError:
            payload = None
        if isinstance(payload, dict) and payload.get("error"):
            message = str(payload.get("error_description") or payload["error"])
    return ApiError(
        message,
        status_code=status_code,
        request_headers=request_headers,
        response_body=body,
        payload=payload,
    )


def classify(
    status_code: int,
    body: str,
    *,
    shape: ResultShape = ResultShape.STRUCTURED,
    request_headers: Optional[Mapping[str, str]] = None,
):
    """Return ``Success``, ``EmptySuccess`` or ``NotModified``; raise ``ApiError`` otherwise."""
    decode: Decoder = decoder_for(shape)
    headers = mask_headers(request_headers)

    if status_code == NOT_MODIFIED_STATUS and body == "":
        return NotModified(
            message=NOT_MODIFIED_MESSAGE,
            payload=decode(json.dumps({"message": NOT_MODIFIED_MESSAGE})),
        )

    if status_code in SUCCESS_STATUSES or status_code == NOT_MODIFIED_STATUS:
        if body == "":
            return EmptySuccess(payload=decode(json.dumps({"success": True})))
        try:
            return Success(payload=decode(body))
        except ValueError:
            raise ApiError(
                "Response body is not valid JSON",
                status_code=status_code,
                request_headers=headers,
                response_body=body,
            ) from None

    err = _error_from_body(status_code, body, headers)
    _logger.debug("HTTP %s classified as ApiError: %s", status_code, err.message)
    raise err
