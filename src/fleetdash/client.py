"""High-level async client for the fleet REST API."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from fleetdash._api import decision_logs as _logs_api
from fleetdash._api import login as _login_api
from fleetdash._api import vehicles as _vehicles_api
from fleetdash._transport import HttpTransport, Transport
from fleetdash.config import FleetConfig
from fleetdash.credentials import CredentialStore, FileCredentialStore
from fleetdash.exceptions import RequestSetupError
from fleetdash.models.decision_log import DecisionLogFeed, DecisionLogPage
from fleetdash.models.token import AuthToken
from fleetdash.models.vehicle import Vehicle

_logger = logging.getLogger(__name__)


class FleetClient:
    """Async gateway to the fleet backend.

    Every request reads the credential store and carries the stored token as
    a bearer credential when there is one. The client never writes the
    store itself; :class:`fleetdash.session.SessionManager` owns that.

    Concurrent calls are not coalesced: two calls for the same resource
    produce two round trips.

    Usage::

        async with FleetClient(config) as client:
            vehicles = await client.list_vehicles()
    """

    def __init__(
        self,
        config: FleetConfig,
        credentials: CredentialStore | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config
        self._credentials: CredentialStore = (
            credentials if credentials is not None else FileCredentialStore(config.credentials_path)
        )
        self._external_session = session is not None
        self._http_session = session
        self._external_transport = transport is not None
        self._transport: Transport | None = transport

    @property
    def config(self) -> FleetConfig:
        return self._config

    @property
    def credentials(self) -> CredentialStore:
        return self._credentials

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> FleetClient:
        if self._external_transport:
            return self
        _logger.debug("Opening fleet client base_url=%s", self._config.base_url)
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(self._config, self._credentials, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        if not self._external_transport:
            self._transport = None

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise RequestSetupError("Client not initialized. Use 'async with FleetClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    async def login(self, username: str, password: str) -> AuthToken:
        """Exchange credentials for a bearer token.

        Raises
        ------
        AuthenticationError
            The backend rejected the username or password.
        """
        return await _login_api.login(self._require_transport(), username, password)

    # ------------------------------------------------------------------
    # Read endpoints
    # ------------------------------------------------------------------

    async def list_vehicles(self) -> list[Vehicle]:
        """Fetch all vehicles of the fleet."""
        return await _vehicles_api.fetch_vehicle_list(self._require_transport())

    async def get_vehicle(self, vehicle_id: str) -> Vehicle:
        """Fetch one vehicle; raises :class:`NotFoundError` if there is none."""
        return await _vehicles_api.fetch_vehicle(self._require_transport(), vehicle_id)

    async def list_decision_logs_for_vehicle(
        self,
        vehicle_id: str,
        *,
        page: int | None = None,
        page_size: int | None = None,
    ) -> DecisionLogPage:
        """Fetch the decision logs of one vehicle, optionally one page of them."""
        return await _logs_api.fetch_vehicle_decision_logs(
            self._require_transport(),
            vehicle_id,
            page=page,
            page_size=page_size,
        )

    async def list_all_decision_logs(self) -> DecisionLogFeed:
        """Fetch the decision logs of every vehicle."""
        return await _logs_api.fetch_all_decision_logs(self._require_transport())
