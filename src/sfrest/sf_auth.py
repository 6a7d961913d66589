from __future__ import annotations

import json
import logging
from typing import Any, Tuple, Union

from .classifier import classify
from .encoder import FORM_CONTENT_TYPE, HttpMethod, RequestSpec, encode
from .exceptions import AuthError
from .results import ResultShape, Success, decoder_for
from .session import Session
from .transport import execute

_logger = logging.getLogger(__name__)

TOKEN_PATH = "/services/oauth2/token"
GRANT_TYPE = "password"


def build_login_spec(
    client_id: str,
    client_secret: str,
    username: str,
    password: str,
    security_token: str,
) -> RequestSpec:
    """OAuth2 password grant: form encoded, the security token appended to the password."""
    return RequestSpec(
        path=TOKEN_PATH,
        params={
            "grant_type": GRANT_TYPE,
            "client_id": client_id or "",
            "client_secret": client_secret or "",
            "username": username,
            "password": f"{password}{security_token or ''}",
        },
        method=HttpMethod.POST,
        extra_headers={"Content-Type": FORM_CONTENT_TYPE},
    )


def authenticate(
    login_url: str,
    api_version: Union[str, int],
    client_id: str,
    client_secret: str,
    username: str,
    password: str,
    security_token: str = "",
    *,
    shape: ResultShape = ResultShape.STRUCTURED,
) -> Tuple[Session, Any, str]:
    """Exchange username/password for an access token.

    Returns ``(session, payload, raw_body)`` where ``payload`` is the token
    response decoded in ``shape`` (token type, scope and signature included).
    """
    spec = build_login_spec(client_id, client_secret, username, password, security_token)
    request = encode(spec, root=login_url.rstrip("/"))

    _logger.debug("Requesting access token from %s", request.url)
    raw = execute(request)
    result = classify(raw.status_code, raw.body, shape=shape, request_headers=raw.request_headers)

    if not isinstance(result, Success):
        raise AuthError(f"Login returned no token payload (HTTP {raw.status_code})")

    fields = json.loads(raw.body)
    if not isinstance(fields, dict):
        raise AuthError("Login response is not a JSON object")
    session = Session.from_token_response(fields, api_version)

    _logger.info("Logged in to Salesforce instance=%s", session.base_url)
    return session, result.payload, raw.body
