"""Turn a logical request into URL, headers and body bytes.

Header layering is fixed: the client defaults, then the per-call headers,
then ``Authorization`` (added last so a caller can never override it).
Keys are compared case-insensitively, as HTTP does.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, Optional, Union
from urllib.parse import quote, urlencode

from requests.structures import CaseInsensitiveDict

from .session import Session

_logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

DEFAULT_HEADERS: Dict[str, str] = {"Content-Type": JSON_CONTENT_TYPE}

ParamValue = Union[str, List[str]]


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


@dataclass
class RequestSpec:
    path: str
    params: Dict[str, ParamValue] = field(default_factory=dict)
    method: Union[HttpMethod, str] = HttpMethod.GET
    extra_headers: Dict[str, str] = field(default_factory=dict)

    @property
    def verb(self) -> str:
        # Unknown verbs are passed through untouched.
        if isinstance(self.method, HttpMethod):
            return self.method.value
        return str(self.method)


@dataclass(frozen=True)
class EncodedRequest:
    method: str
    url: str
    headers: Dict[str, str]
    body: Optional[bytes] = None


def merge_headers(
    base_headers: Mapping[str, str],
    extra_headers: Optional[Mapping[str, str]] = None,
    session: Optional[Session] = None,
) -> Dict[str, str]:
    merged: CaseInsensitiveDict = CaseInsensitiveDict(base_headers)
    merged.update(extra_headers or {})
    if session is not None:
        merged["Authorization"] = f"Bearer {session.access_token}"
    return dict(merged.items())


def _is_json(content_type: Optional[str]) -> bool:
    if not content_type:
        return False
    return content_type.split(";", 1)[0].strip().lower() == JSON_CONTENT_TYPE


def encode_query(params: Mapping[str, ParamValue]) -> str:
    """RFC 3986 query string: space is ``%20``; unreserved characters and commas stay literal."""
    return urlencode(params, doseq=True, quote_via=quote, safe=",")


def encode_body(params: Mapping[str, ParamValue], content_type: Optional[str]) -> bytes:
    if _is_json(content_type):
        return json.dumps(params).encode("utf-8")
    return urlencode(params, doseq=True).encode("utf-8")


def encode(
    spec: RequestSpec,
    *,
    root: str,
    base_headers: Mapping[str, str] = DEFAULT_HEADERS,
    session: Optional[Session] = None,
) -> EncodedRequest:
    """Build the request for ``spec`` against ``root`` (a resource root or base URL).

    GET parameters go to the query string. Any other verb carries them in
    the body, JSON or form encoded depending on the effective Content-Type.
    """
    headers = merge_headers(base_headers, spec.extra_headers, session)
    url = root + spec.path
    body: Optional[bytes] = None
    verb = spec.verb

    if spec.params:
        if verb == HttpMethod.GET.value:
            url = f"{url}?{encode_query(spec.params)}"
        else:
            content_type = CaseInsensitiveDict(headers).get("Content-Type")
            body = encode_body(spec.params, content_type)

    _logger.debug("Encoded %s %s (body=%s)", verb, url, "yes" if body is not None else "no")
    return EncodedRequest(method=verb, url=url, headers=headers, body=body)
