from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Union

from .exceptions import AuthError

DATA_PATH = "/services/data"


def normalize_api_version(version: Union[str, int, float]) -> str:
    """``60``, ``"60.0"`` and ``"v60.0"`` all become ``"60"`` / ``"60.0"``."""
    text = str(version).strip()
    if text[:1] in ("v", "V"):
        text = text[1:]
    return text


def resource_root_for(base_url: str, api_version: Union[str, int]) -> str:
    return f"{base_url.rstrip('/')}{DATA_PATH}/v{normalize_api_version(api_version)}/"


@dataclass(frozen=True)
class Session:
    """Access token and resolved instance URLs from a successful login."""

    access_token: str
    base_url: str
    resource_root: str

    @classmethod
    def from_token_response(cls, payload: Mapping[str, Any], api_version: Union[str, int]) -> Session:
        """Build a session from a decoded OAuth token response."""
        missing = [k for k in ("access_token", "instance_url") if not payload.get(k)]
        if missing:
            raise AuthError("Login response is missing required fields: " + ", ".join(missing))

        base_url = str(payload["instance_url"]).rstrip("/")
        return cls(
            access_token=str(payload["access_token"]),
            base_url=base_url,
            resource_root=resource_root_for(base_url, api_version),
        )
