from sfrest import api


def test_sfconfig_from_env(monkeypatch):
    """SFConfig.from_env reads the connection variables."""
    monkeypatch.setattr(api, "load_env_files", lambda **kw: None)
    monkeypatch.setenv("SF_CLIENT_ID", "cid")
    monkeypatch.setenv("SF_CLIENT_SECRET", "csecret")
    monkeypatch.setenv("SF_LOGIN_URL", "https://example.my.salesforce.com/")
    monkeypatch.setenv("SF_API_VERSION", "58.0")
    monkeypatch.setenv("SF_RESULT_SHAPE", "object")

    cfg = api.SFConfig.from_env()

    assert cfg.client_id == "cid"
    assert cfg.client_secret == "csecret"
    assert cfg.instance_url == "https://example.my.salesforce.com"
    assert cfg.api_version == "58.0"
    assert cfg.result_shape is api.ResultShape.STRUCTURED

    # Credentials are read at login time only
    assert not hasattr(cfg, "username")
    assert not hasattr(cfg, "password")


def test_sfconfig_missing_is_tolerated(monkeypatch):
    """from_env() still returns a config when variables are missing or empty."""
    monkeypatch.setattr(api, "load_env_files", lambda **kw: None)
    for var in ["SF_CLIENT_ID", "SF_CLIENT_SECRET", "SF_API_VERSION", "SF_RESULT_SHAPE"]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("SF_LOGIN_URL", "")

    cfg = api.SFConfig.from_env()

    assert cfg.client_id is None
    assert cfg.client_secret is None
    assert cfg.api_version == "60.0"
    assert cfg.instance_url.startswith("https://")


def test_client_without_config_reads_env(monkeypatch):
    monkeypatch.setattr(api, "load_env_files", lambda **kw: None)
    monkeypatch.setenv("SF_CLIENT_ID", "env_id")

    client = api.SalesforceAPI()

    assert client.cfg.client_id == "env_id"
    assert client.session is None
    assert client.last_response is None
