"""
Airbrake API Client - Authenticated HTTP access to the Airbrake REST API.

The client owns a Session (base URL + credential) and exposes generic verb
operations against it. The credential is always sent as the ``key`` query
parameter. Transport failures are returned as part of the response rather
than raised, so callers can classify them separately from remote statuses.
"""

import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import aiohttp

from errors import InvalidCredentials, MalformedResponse, TransportError

logger = logging.getLogger(__name__)

# Status reported when the request never produced an HTTP response.
TRANSPORT_FAILURE_STATUS = 0

DEFAULT_TIMEOUT = 30


@dataclass(frozen=True)
class Session:
    """Authenticated context used for every remote call."""

    base_url: str
    token: str = field(default="", repr=False)  # Never log the credential

    def __post_init__(self):
        if not self.base_url:
            raise ValueError("Session base_url cannot be empty")
        if not self.base_url.endswith("/"):
            object.__setattr__(self, "base_url", self.base_url + "/")

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def url_for(self, path: str, resource_id: Optional[str] = None) -> str:
        """Build the absolute URL for a resource path (and optional id)."""
        url = f"{self.base_url}{path}"
        if resource_id is not None:
            url = f"{url}/{resource_id}"
        return url


@dataclass
class RawResponse:
    """Status code, raw body and transport error (if any) from a verb call."""

    status: int
    body: bytes = b""
    error: Optional[TransportError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.status < 300

    def json(self) -> Any:
        """Decode the body as JSON, raising MalformedResponse on failure."""
        try:
            return json.loads(self.body)
        except (ValueError, TypeError) as e:
            raise MalformedResponse(f"error parsing JSON: {e}") from e


class AirbrakeClient:
    """
    Generic verb operations against the Airbrake API.

    A new aiohttp session is opened per request; the only state shared
    between calls is the immutable Session, so one client can be used from
    several concurrent hook invocations.
    """

    def __init__(self, session: Session, timeout: int = DEFAULT_TIMEOUT):
        self.session = session
        self.timeout = timeout

    def _query(self, params: Optional[Dict[str, Any]] = None) -> Dict[str, str]:
        query = {k: str(v) for k, v in (params or {}).items()}
        if self.session.is_authenticated:
            query["key"] = self.session.token
        return query

    async def _request(
        self,
        method: str,
        url: str,
        params: Dict[str, str],
        json_body: Optional[Dict[str, Any]] = None,
    ) -> RawResponse:
        headers = {}
        if json_body is not None:
            headers["Content-Type"] = "application/json"

        timeout = aiohttp.ClientTimeout(total=self.timeout)
        logger.debug(f"{method} {url}")

        try:
            async with aiohttp.ClientSession(timeout=timeout) as http:
                async with http.request(
                    method,
                    url,
                    params=params,
                    json=json_body,
                    headers=headers,
                ) as response:
                    body = await response.read()
                    return RawResponse(status=response.status, body=body)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.debug(f"{method} {url} failed: {e!r}")
            return RawResponse(
                status=TRANSPORT_FAILURE_STATUS,
                error=TransportError(f"{method} {url} failed: {e!r}"),
            )

    async def list(
        self, path: str, params: Optional[Dict[str, Any]] = None
    ) -> RawResponse:
        """GET a collection (or single document) with optional query parameters."""
        return await self._request("GET", self.session.url_for(path), self._query(params))

    async def create(
        self, path: str, params: Optional[Dict[str, Any]] = None
    ) -> RawResponse:
        """POST a new entity; fields are sent as query parameters, not a body."""
        return await self._request(
            "POST", self.session.url_for(path), self._query(params)
        )

    async def update(
        self, path: str, resource_id: str, fields: Dict[str, Any]
    ) -> RawResponse:
        """PUT a JSON document of ``fields`` to ``path/resource_id``."""
        return await self._request(
            "PUT",
            self.session.url_for(path, str(resource_id)),
            self._query(),
            json_body=fields,
        )

    async def remove(self, path: str, resource_id: str) -> RawResponse:
        """DELETE ``path/resource_id``."""
        return await self._request(
            "DELETE", self.session.url_for(path, str(resource_id)), self._query()
        )


async def authenticate(
    base_url: str,
    email: str = "",
    password: str = "",
    api_key: str = "",
    timeout: int = DEFAULT_TIMEOUT,
) -> AirbrakeClient:
    """
    Establish an authenticated client.

    With an API key, the key is validated against ``users/current``.
    Otherwise the email/password pair is exchanged for a session token at
    ``sessions``. The API key wins when both are supplied.

    Raises:
        TransportError: The service could not be reached.
        InvalidCredentials: The key or the login was rejected.
        MalformedResponse: The login response carried no string ``token``.
    """
    if api_key:
        client = AirbrakeClient(Session(base_url, api_key), timeout=timeout)
        response = await client.list("users/current")
        if response.error is not None:
            raise response.error
        if response.status >= 300:
            raise InvalidCredentials(
                f"users/current rejected the API key (status {response.status})"
            )
        logger.info("Authenticated to Airbrake with API key")
        return client

    anonymous = AirbrakeClient(Session(base_url), timeout=timeout)
    response = await anonymous.list(
        "sessions", {"email": email, "password": password}
    )
    if response.error is not None:
        raise response.error
    if response.status >= 300:
        raise InvalidCredentials(
            f"sessions rejected the login/password (status {response.status})"
        )

    data = response.json()
    token = data.get("token") if isinstance(data, dict) else None
    if not isinstance(token, str):
        raise MalformedResponse("token not found in sessions response")

    logger.info(f"Authenticated to Airbrake as {email}")
    return AirbrakeClient(Session(base_url, token), timeout=timeout)
