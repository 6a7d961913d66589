from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional, Union

from .classifier import classify
from .encoder import DEFAULT_HEADERS, HttpMethod, RequestSpec, encode
from .env_loader import env, load_env_files
from .exceptions import AuthError, MissingCredentialsError, SalesforceError, ValidationError
from .results import ApiResult, Failure, ResultShape, Success
from .session import DATA_PATH, Session, normalize_api_version, resource_root_for
from .sf_auth import authenticate
from .transport import execute

_logger = logging.getLogger(__name__)

OBJECT_PATH = "sobjects/"

_DAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


# ----------------------------------------------------------------------
# Configuration dataclass
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class SFConfig:
    """Connection settings for the REST client. Immutable once built."""

    # Base login URL; replaced by the instance URL returned at login
    instance_url: str = "https://login.salesforce.com"

    # "60.0", 60 and "v60.0" are all accepted
    api_version: Union[str, int] = "60.0"

    client_id: Optional[str] = None
    client_secret: Optional[str] = None

    result_shape: ResultShape = field(default=ResultShape.STRUCTURED)

    def __post_init__(self) -> None:
        object.__setattr__(self, "instance_url", self.instance_url.rstrip("/"))
        object.__setattr__(self, "api_version", normalize_api_version(self.api_version))
        object.__setattr__(self, "result_shape", ResultShape.parse(self.result_shape))

    @classmethod
    def from_env(cls) -> SFConfig:
        """Load configuration from environment variables (and a .env file, if any)."""
        load_env_files(quiet=True)
        return cls(
            instance_url=env("SF_LOGIN_URL", "https://login.salesforce.com"),
            api_version=env("SF_API_VERSION", "60.0"),
            client_id=env("SF_CLIENT_ID"),
            client_secret=env("SF_CLIENT_SECRET"),
            result_shape=env("SF_RESULT_SHAPE", ResultShape.STRUCTURED.value),
        )


def format_if_modified_since(since: Any) -> str:
    """Render ``since`` as ``Ddd, D Mon YYYY HH:MM:SS TZ``. Naive datetimes are taken as UTC."""
    if not isinstance(since, datetime):
        raise ValidationError(
            "To get object metadata for an object, you must provide a datetime, "
            f"not {type(since).__name__}"
        )
    if since.tzinfo is None:
        since = since.replace(tzinfo=timezone.utc)
    tz_name = since.tzname() or "UTC"
    return (
        f"{_DAYS[since.weekday()]}, {since.day} {_MONTHS[since.month - 1]} {since.year:04d} "
        f"{since:%H:%M:%S} {tz_name}"
    )


# ----------------------------------------------------------------------
# Main API client
# ----------------------------------------------------------------------
class SalesforceAPI:
    """Salesforce REST API client using the OAuth password grant.

    Every operation returns an :class:`~sfrest.results.ApiResult`; failures
    come back as :class:`~sfrest.results.Failure` carrying the typed error.
    Each request opens and closes its own HTTP session, so one client can
    be shared between threads once logged in.
    """

    def __init__(self, cfg: Optional[SFConfig] = None) -> None:
        self.cfg = cfg or SFConfig.from_env()
        self.last_response: Optional[str] = None
        self._session: Optional[Session] = None

    # --------------------------- Session state -----------------------

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def is_logged_in(self) -> bool:
        return self._session is not None and bool(self._session.access_token)

    @property
    def base_url(self) -> str:
        return self._session.base_url if self._session else self.cfg.instance_url

    @property
    def resource_root(self) -> str:
        if self._session:
            return self._session.resource_root
        return resource_root_for(self.cfg.instance_url, self.cfg.api_version)

    # --------------------------- Authentication ----------------------

    def login(self, username: str, password: str, security_token: str = "") -> ApiResult:
        """Log in with the password grant. ``Success.payload`` is the raw token response."""
        try:
            session, payload, raw_body = authenticate(
                self.cfg.instance_url,
                self.cfg.api_version,
                self.cfg.client_id or "",
                self.cfg.client_secret or "",
                username,
                password,
                security_token,
                shape=self.cfg.result_shape,
            )
        except SalesforceError as e:
            return self._fail("login", e)

        self._session = session
        self.last_response = raw_body
        return Success(payload=payload)

    def login_from_env(self) -> ApiResult:
        """Log in with SF_USERNAME / SF_PASSWORD / SF_SECURITY_TOKEN."""
        load_env_files(quiet=True)
        creds = {
            "SF_USERNAME": env("SF_USERNAME"),
            "SF_PASSWORD": env("SF_PASSWORD"),
            "SF_SECURITY_TOKEN": env("SF_SECURITY_TOKEN"),
        }
        missing = [k for k, v in creds.items() if not v]
        if missing:
            return self._fail("login", MissingCredentialsError(missing))
        return self.login(creds["SF_USERNAME"], creds["SF_PASSWORD"], creds["SF_SECURITY_TOKEN"])

    # --------------------------- Organization ------------------------

    def get_api_versions(self) -> ApiResult:
        """List the API versions of the instance. Needs no login."""
        return self._call(RequestSpec(path=""), root=self.base_url + DATA_PATH, auth_required=False)

    def get_org_limits(self) -> ApiResult:
        return self._call(RequestSpec(path="limits/"))

    def get_available_resources(self) -> ApiResult:
        return self._call(RequestSpec(path=""))

    def get_all_objects(self) -> ApiResult:
        return self._call(RequestSpec(path=OBJECT_PATH))

    def get_object_metadata(
        self,
        object_name: str,
        full: bool = False,
        since: Optional[datetime] = None,
    ) -> ApiResult:
        """Describe ``object_name``.

        ``full`` asks for the full describe (fields, URLs, child relationships).
        ``since`` sends If-Modified-Since; an unchanged object yields
        :class:`~sfrest.results.NotModified`.
        """
        headers: Dict[str, str] = {}
        if since is not None:
            try:
                headers["If-Modified-Since"] = format_if_modified_since(since)
            except ValidationError as e:
                return self._fail("get_object_metadata", e)

        path = f"{OBJECT_PATH}{object_name}/describe/" if full else f"{OBJECT_PATH}{object_name}"
        return self._call(RequestSpec(path=path, extra_headers=headers))

    # --------------------------- Records -----------------------------

    def create(self, object_name: str, data: Dict[str, Any]) -> ApiResult:
        return self._call(RequestSpec(path=f"{OBJECT_PATH}{object_name}", params=data, method=HttpMethod.POST))

    def upsert(self, object_name: str, data: Dict[str, Any]) -> ApiResult:
        """Upsert by external id: ``object_name`` is ``Object/ExtIdField/value``."""
        return self._call(
            RequestSpec(path=f"{OBJECT_PATH}{object_name}", params=data, method=HttpMethod.PATCH)
        )

    def update(self, object_name: str, object_id: str, data: Dict[str, Any]) -> ApiResult:
        return self._call(
            RequestSpec(
                path=f"{OBJECT_PATH}{object_name}/{object_id}",
                params=data,
                method=HttpMethod.PATCH,
            )
        )

    def delete(self, object_name: str, object_id: str) -> ApiResult:
        return self._call(
            RequestSpec(path=f"{OBJECT_PATH}{object_name}/{object_id}", method=HttpMethod.DELETE)
        )

    def get(self, object_name: str, object_id: str, fields: Optional[Iterable[str]] = None) -> ApiResult:
        params: Dict[str, Any] = {}
        if fields is not None:
            params["fields"] = ",".join(fields)
        return self._call(RequestSpec(path=f"{OBJECT_PATH}{object_name}/{object_id}", params=params))

    # --------------------------- Query -------------------------------

    def search_soql(self, query: str, include_deleted: bool = False, explain: bool = False) -> ApiResult:
        """Run a SOQL query.

        ``include_deleted`` uses queryAll/ (deleted and merged rows too). ``explain``
        asks for the query plan instead of the rows.
        """
        key = "explain" if explain else "q"
        path = "queryAll/" if include_deleted else "query/"
        return self._call(RequestSpec(path=path, params={key: query}))

    def get_query_from_url(self, path: str) -> ApiResult:
        """GET a server-relative URL such as a query's ``nextRecordsUrl``."""
        return self._call(RequestSpec(path=path), root=self.base_url)

    # --------------------------- Pipeline ----------------------------

    def _require_session(self) -> Session:
        if not self.is_logged_in:
            raise AuthError("You have not logged in yet.")
        return self._session  # type: ignore[return-value]

    def _call(
        self,
        spec: RequestSpec,
        *,
        root: Optional[str] = None,
        auth_required: bool = True,
    ) -> ApiResult:
        """Encode, send and classify one request."""
        try:
            session = self._require_session() if auth_required else None
            request = encode(
                spec,
                root=root if root is not None else self.resource_root,
                base_headers=DEFAULT_HEADERS,
                session=session,
            )
            raw = execute(request)
            result = classify(
                raw.status_code,
                raw.body,
                shape=self.cfg.result_shape,
                request_headers=raw.request_headers,
            )
        except SalesforceError as e:
            return self._fail(f"{spec.verb} {spec.path or '/'}", e)

        if isinstance(result, Success):
            self.last_response = raw.body
        return result

    @staticmethod
    def _fail(op: str, error: SalesforceError) -> Failure:
        _logger.warning("%s failed: %s: %s", op, type(error).__name__, error)
        return Failure(error=error)
