from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import pytest

from sfrest.api import SalesforceAPI, SFConfig
from sfrest.results import ResultShape
from sfrest.session import Session, resource_root_for
from sfrest.transport import RawResponse

INSTANCE_URL = "https://myorg.my.salesforce.com"


class FakeTransport:
    """Stands in for ``sfrest.transport.execute``; records every request it is given."""

    def __init__(self) -> None:
        self.requests: List[Any] = []
        self._queue: List[RawResponse] = []

    def reply(self, status_code: int = 200, body: Any = "", headers: Optional[Dict[str, str]] = None):
        if not isinstance(body, str):
            body = json.dumps(body)
        self._queue.append(
            RawResponse(
                status_code=status_code,
                headers=headers or {"Content-Type": "application/json"},
                body=body,
                request_headers={},
            )
        )
        return self

    def __call__(self, request):
        self.requests.append(request)
        if not self._queue:
            raise AssertionError(f"unexpected request: {request.method} {request.url}")
        raw = self._queue.pop(0)
        return RawResponse(raw.status_code, raw.headers, raw.body, dict(request.headers))

    @property
    def last(self):
        return self.requests[-1]


@pytest.fixture
def fake_transport(monkeypatch):
    fake = FakeTransport()
    monkeypatch.setattr("sfrest.api.execute", fake)
    monkeypatch.setattr("sfrest.sf_auth.execute", fake)
    return fake


@pytest.fixture
def cfg():
    return SFConfig(
        instance_url="https://login.salesforce.com",
        api_version="60.0",
        client_id="cid",
        client_secret="csecret",
        result_shape=ResultShape.MAPPING,
    )


@pytest.fixture
def api(cfg):
    return SalesforceAPI(cfg)


@pytest.fixture
def connected_api(cfg):
    """Return an API instance with a session already in place."""
    api = SalesforceAPI(cfg)
    api._session = Session(
        access_token="00DTOKEN",
        base_url=INSTANCE_URL,
        resource_root=resource_root_for(INSTANCE_URL, "60.0"),
    )
    return api
