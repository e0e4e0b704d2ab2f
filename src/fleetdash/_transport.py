"""HTTP transport with bearer credential attachment and failure classification."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

import aiohttp

from fleetdash._redact import redact_for_log
from fleetdash.config import FleetConfig
from fleetdash.credentials import CredentialStore
from fleetdash.exceptions import CredentialStoreError, NetworkUnreachableError, RequestSetupError

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ApiResponse:
    """A response that made it back from the backend, whatever its status.

    ``body`` is the decoded JSON document, or ``None`` when the body was
    empty or not JSON (``text`` keeps the original in that case).
    """

    status: int
    body: Any
    text: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Endpoint modules only need ``request``; tests pass small fakes that
    implement it instead of spinning up a server.
    """

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        json_body: Mapping[str, Any] | None = None,
        params: Mapping[str, str] | None = None,
    ) -> ApiResponse:
        ...


class HttpTransport:
    """aiohttp transport for the fleet REST API.

    The credential store is read before every request; a stored token is
    sent as ``Authorization: Bearer <token>``, otherwise the request goes out
    unauthenticated. There are no retries and no timeouts beyond aiohttp's
    defaults.
    """

    def __init__(
        self,
        config: FleetConfig,
        credentials: CredentialStore,
        http_session: aiohttp.ClientSession,
    ) -> None:
        self._config = config
        self._credentials = credentials
        self._http = http_session

    def _build_headers(self, endpoint: str) -> dict[str, str]:
        headers: dict[str, str] = {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "User-Agent": self._config.user_agent,
        }
        try:
            token = self._credentials.get()
        except CredentialStoreError as exc:
            raise RequestSetupError(f"Cannot read stored credential: {exc}", endpoint=endpoint) from exc
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        json_body: Mapping[str, Any] | None = None,
        params: Mapping[str, str] | None = None,
    ) -> ApiResponse:
        """Send one request and return the decoded response.

        Raises
        ------
        RequestSetupError
            The request could not be built (invalid URL, unserializable
            body, unreadable credential).
        NetworkUnreachableError
            The request was sent but no complete response came back.
        """
        headers = self._build_headers(endpoint)
        url = f"{self._config.base_url}{endpoint}"

        data: str | None = None
        if json_body is not None:
            try:
                data = json.dumps(dict(json_body), separators=(",", ":"))
            except (TypeError, ValueError) as exc:
                raise RequestSetupError(f"Cannot encode request body for {endpoint}: {exc}", endpoint=endpoint) from exc

        _logger.debug("%s %s params=%s body=%s", method, url, params, redact_for_log(json_body))

        try:
            async with self._http.request(method, url, data=data, params=params, headers=headers) as resp:
                raw = await resp.read()
                status = resp.status
        except aiohttp.InvalidURL as exc:
            raise RequestSetupError(f"Invalid URL for {endpoint}: {exc}", endpoint=endpoint) from exc
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise NetworkUnreachableError(
                f"No response from {endpoint}: {exc or type(exc).__name__}",
                endpoint=endpoint,
            ) from exc
        except ValueError as exc:
            # yarl and aiohttp reject malformed URLs and headers with plain ValueError.
            raise RequestSetupError(f"Cannot build request for {endpoint}: {exc}", endpoint=endpoint) from exc

        text = raw.decode("utf-8", errors="replace")
        body: Any = None
        if text.strip():
            try:
                body = json.loads(text)
            except json.JSONDecodeError:
                body = None

        _logger.debug("%s %s -> %d body=%s", method, url, status, redact_for_log(body if body is not None else text))
        return ApiResponse(status=status, body=body, text=text)
