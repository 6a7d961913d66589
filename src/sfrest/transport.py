from __future__ import annotations

import logging
import ssl
from dataclasses import dataclass
from typing import Dict, Tuple

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.ssl_ import create_urllib3_context

from .encoder import EncodedRequest
from .exceptions import TransportError

_logger = logging.getLogger(__name__)

CONNECT_TIMEOUT = 2.0
READ_TIMEOUT = 60.0
TIMEOUT: Tuple[float, float] = (CONNECT_TIMEOUT, READ_TIMEOUT)
MIN_TLS_VERSION = ssl.TLSVersion.TLSv1_2


@dataclass(frozen=True)
class RawResponse:
    status_code: int
    headers: Dict[str, str]
    body: str
    request_headers: Dict[str, str]


class TLSPinnedAdapter(HTTPAdapter):
    """HTTPAdapter refusing anything older than ``MIN_TLS_VERSION``."""

    def init_poolmanager(self, *args, **kwargs):
        ctx = create_urllib3_context()
        ctx.minimum_version = MIN_TLS_VERSION
        kwargs["ssl_context"] = ctx
        return super().init_poolmanager(*args, **kwargs)


def _new_session() -> requests.Session:
    s = requests.Session()
    s.mount("https://", TLSPinnedAdapter())
    return s


def execute(request: EncodedRequest) -> RawResponse:
    """Send one request on a session owned by this call and buffer the full response.

    Nothing is retried: any connection-level failure is raised as
    :class:`TransportError` straight away.
    """
    _logger.debug("%s %s", request.method, request.url)
    with _new_session() as s:
        try:
            r = s.request(
                request.method,
                request.url,
                data=request.body,
                headers=request.headers,
                timeout=TIMEOUT,
                stream=False,
            )
        except requests.RequestException as e:
            _logger.warning("Transport failure for %s %s: %s", request.method, request.url, e)
            raise TransportError(str(e)) from e

        sent = dict(r.request.headers) if r.request is not None else dict(request.headers)
        _logger.debug("HTTP %s from %s", r.status_code, request.url)
        return RawResponse(
            status_code=r.status_code,
            headers=dict(r.headers),
            body=r.text,
            request_headers=sent,
        )
