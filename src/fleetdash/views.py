"""View models for the dashboard screens.

Views are the terminal error boundary: they catch :class:`FleetError`, log
it and expose a human-readable message, so a failed fetch never takes down
the application. Each view owns a :class:`ViewScope`; closing the scope when
the view goes away cancels its pending fetches, and a completion that still
arrives afterwards is dropped.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Coroutine
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from fleetdash.client import FleetClient
from fleetdash.exceptions import (
    AuthenticationError,
    FleetError,
    NetworkUnreachableError,
    NotFoundError,
    RequestSetupError,
    ServerError,
)
from fleetdash.models.decision_log import DecisionLog
from fleetdash.models.vehicle import Vehicle
from fleetdash.routing import landing_path
from fleetdash.session import SessionManager
from fleetdash.stats import ChartSeries, aggregate, to_chart_series

_logger = logging.getLogger(__name__)

T = TypeVar("T")

MSG_CREDENTIALS_REQUIRED = "Username and password are required."
MSG_LOGIN_FAILED = "Login failed. Please check your username and password."
MSG_LOGIN_NO_RESPONSE = "Login failed: No response from server."
MSG_LOGIN_SETUP = "Login failed: An unexpected error occurred during request setup."
MSG_VEHICLES_FAILED = "Failed to fetch vehicles. Please try again later."
MSG_CHART_FAILED = "Failed to fetch decision logs for chart."
MSG_DETAIL_FAILED = "Failed to fetch vehicle details. Please try again later."
MSG_VEHICLE_NOT_FOUND = "Vehicle not found."
MSG_NO_VEHICLES = "No vehicles found."
MSG_NO_LOGS = "No decision logs found for this vehicle."


def login_error_message(exc: FleetError) -> str:
    """Message shown on the login form for a failed attempt."""
    if isinstance(exc, ServerError):
        return exc.message or MSG_LOGIN_FAILED
    if isinstance(exc, NetworkUnreachableError):
        return MSG_LOGIN_NO_RESPONSE
    if isinstance(exc, RequestSetupError):
        return MSG_LOGIN_SETUP
    return MSG_LOGIN_FAILED


class ViewScope:
    """Cancellation scope bound to the lifetime of one view.

    Usage::

        async with ViewScope("dashboard") as scope:
            scope.spawn(fetch())
            await scope.wait()
    """

    def __init__(self, name: str = "view") -> None:
        self._name = name
        self._tasks: set[asyncio.Task[Any]] = set()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        return sum(1 for task in self._tasks if not task.done())

    def spawn(self, coro: Coroutine[Any, Any, T]) -> asyncio.Task[T]:
        """Run *coro* as a task owned by this scope."""
        if self._closed:
            coro.close()
            raise RuntimeError(f"View scope {self._name!r} is closed")
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def deliver(self, update: Callable[[], None]) -> bool:
        """Apply a completion to view state unless the scope has been closed."""
        if self._closed:
            _logger.debug("Dropping completion for closed view scope %s", self._name)
            return False
        update()
        return True

    async def wait(self) -> None:
        """Wait for every task spawned so far; re-raises unexpected failures."""
        tasks = list(self._tasks)
        if not tasks:
            return
        results = await asyncio.gather(*tasks, return_exceptions=True)
        for result in results:
            if isinstance(result, BaseException) and not isinstance(result, asyncio.CancelledError):
                raise result

    def close(self) -> None:
        """Cancel pending tasks; later completions become no-ops."""
        if self._closed:
            return
        self._closed = True
        for task in list(self._tasks):
            task.cancel()
        _logger.debug("View scope %s closed", self._name)

    async def __aenter__(self) -> ViewScope:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        self.close()


@dataclass
class ViewModel(Generic[T]):
    """Loading/error/data triple rendered by one section of a view."""

    loading: bool = False
    error: str | None = None
    data: T | None = None

    def start(self) -> None:
        self.loading = True
        self.error = None

    def succeed(self, data: T) -> None:
        self.loading = False
        self.error = None
        self.data = data

    def fail(self, message: str) -> None:
        self.loading = False
        self.error = message


async def _load_into(
    scope: ViewScope,
    target: ViewModel[T],
    fetch: Callable[[], Awaitable[T]],
    failure_message: Callable[[FleetError], str],
) -> None:
    scope.deliver(target.start)
    try:
        data = await fetch()
    except FleetError as exc:
        _logger.warning("View fetch failed: %s", exc)
        message = failure_message(exc)
        scope.deliver(lambda: target.fail(message))
        return
    scope.deliver(lambda: target.succeed(data))


class LoginView:
    """Login form behavior."""

    def __init__(self, session: SessionManager) -> None:
        self._session = session
        self.error: str | None = None

    @property
    def next_path(self) -> str:
        return landing_path(self._session.state)

    async def submit(self, username: str, password: str) -> bool:
        """Try to log in; on failure ``error`` holds the message to show."""
        self.error = None
        if not username or not password:
            self.error = MSG_CREDENTIALS_REQUIRED
            return False
        try:
            await self._session.login(username, password)
        except FleetError as exc:
            if isinstance(exc, AuthenticationError):
                _logger.info("Login rejected status=%s", exc.status)
            else:
                _logger.warning("Login attempt failed: %s", exc)
            self.error = login_error_message(exc)
            return False
        return True


@dataclass
class DashboardView:
    """Fleet overview: the vehicle list next to the decision statistics chart.

    The two sections load independently; one failing leaves the other
    usable.
    """

    client: FleetClient
    scope: ViewScope = field(default_factory=lambda: ViewScope("dashboard"))
    vehicles: ViewModel[list[Vehicle]] = field(default_factory=ViewModel)
    chart: ViewModel[ChartSeries] = field(default_factory=ViewModel)

    async def _fetch_chart(self) -> ChartSeries:
        feed = await self.client.list_all_decision_logs()
        return to_chart_series(aggregate(feed.logs))

    async def activate(self) -> None:
        self.scope.spawn(
            _load_into(self.scope, self.vehicles, self.client.list_vehicles, lambda _exc: MSG_VEHICLES_FAILED)
        )
        self.scope.spawn(_load_into(self.scope, self.chart, self._fetch_chart, lambda _exc: MSG_CHART_FAILED))
        await self.scope.wait()

    def deactivate(self) -> None:
        self.scope.close()


def _detail_failure(exc: FleetError) -> str:
    if isinstance(exc, NotFoundError):
        return MSG_VEHICLE_NOT_FOUND
    return MSG_DETAIL_FAILED


@dataclass
class VehicleDetail:
    vehicle: Vehicle
    logs: list[DecisionLog]
    total: int


@dataclass
class VehicleDetailView:
    """One vehicle with its decision logs."""

    client: FleetClient
    vehicle_id: str
    scope: ViewScope = field(default_factory=lambda: ViewScope("vehicle-detail"))
    detail: ViewModel[VehicleDetail] = field(default_factory=ViewModel)

    async def _fetch(self) -> VehicleDetail:
        vehicle = await self.client.get_vehicle(self.vehicle_id)
        page = await self.client.list_decision_logs_for_vehicle(self.vehicle_id)
        return VehicleDetail(vehicle=vehicle, logs=list(page.logs), total=page.total)

    async def activate(self) -> None:
        self.scope.spawn(_load_into(self.scope, self.detail, self._fetch, _detail_failure))
        await self.scope.wait()

    def deactivate(self) -> None:
        self.scope.close()
