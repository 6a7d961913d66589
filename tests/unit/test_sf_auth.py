"""Tests for the password-grant login in sfrest.sf_auth."""

from urllib.parse import parse_qs

import pytest

import sfrest.sf_auth as sf_auth
from sfrest.exceptions import ApiError, AuthError, TransportError
from sfrest.results import ResultShape

TOKEN_RESPONSE = {
    "access_token": "00DTOKEN",
    "instance_url": "https://na1.salesforce.com",
    "id": "https://login.salesforce.com/id/00D/005",
    "token_type": "Bearer",
    "issued_at": "1700000000000",
    "signature": "sig",
}


def _authenticate(**overrides):
    kwargs = dict(
        login_url="https://login.salesforce.com/",
        api_version="60.0",
        client_id="cid",
        client_secret="csecret",
        username="user@example.com",
        password="pw",
        security_token="SECTOKEN",
        shape=ResultShape.MAPPING,
    )
    kwargs.update(overrides)
    return sf_auth.authenticate(**kwargs)


def test_build_login_spec():
    spec = sf_auth.build_login_spec("cid", "csecret", "u", "pw", "TOK")

    assert spec.verb == "POST"
    assert spec.path == "/services/oauth2/token"
    assert spec.params == {
        "grant_type": "password",
        "client_id": "cid",
        "client_secret": "csecret",
        "username": "u",
        "password": "pwTOK",
    }
    assert spec.extra_headers["Content-Type"] == "application/x-www-form-urlencoded"


def test_authenticate_success(fake_transport):
    fake_transport.reply(200, TOKEN_RESPONSE)

    session, payload, raw = _authenticate()

    req = fake_transport.last
    assert req.method == "POST"
    assert req.url == "https://login.salesforce.com/services/oauth2/token"
    assert "Authorization" not in req.headers
    form = parse_qs(req.body.decode())
    assert form["grant_type"] == ["password"]
    assert form["password"] == ["pwSECTOKEN"]
    assert form["client_secret"] == ["csecret"]

    assert session.access_token == "00DTOKEN"
    assert session.base_url == "https://na1.salesforce.com"
    assert session.resource_root == "https://na1.salesforce.com/services/data/v60.0/"
    assert payload["token_type"] == "Bearer"
    assert raw.startswith("{")


def test_authenticate_structured_payload(fake_transport):
    fake_transport.reply(200, TOKEN_RESPONSE)

    _, payload, _ = _authenticate(shape=ResultShape.STRUCTURED)

    assert payload.signature == "sig"


def test_authenticate_missing_fields(fake_transport):
    fake_transport.reply(200, {"access_token": "00DTOKEN"})

    with pytest.raises(AuthError, match="instance_url"):
        _authenticate()


def test_authenticate_empty_body(fake_transport):
    fake_transport.reply(200, "")

    with pytest.raises(AuthError):
        _authenticate()


def test_authenticate_invalid_grant(fake_transport):
    fake_transport.reply(400, {"error": "invalid_grant", "error_description": "authentication failure"})

    with pytest.raises(ApiError) as excinfo:
        _authenticate()

    assert excinfo.value.message == "authentication failure"
    assert excinfo.value.status_code == 400


def test_authenticate_transport_error(monkeypatch):
    def boom(request):
        raise TransportError("Failed to resolve 'login.salesforce.com'")

    monkeypatch.setattr(sf_auth, "execute", boom)

    with pytest.raises(TransportError, match="resolve"):
        _authenticate()
