"""Console front end for fleetdash.

Subcommands mirror the dashboard screens::

    fleetdash login --username alice
    fleetdash dashboard
    fleetdash vehicle V-001
    fleetdash logout
"""

from __future__ import annotations

import argparse
import asyncio
import getpass
import json
import logging
import os
import sys
from collections.abc import Awaitable, Callable
from typing import Any
from urllib.parse import quote

from fleetdash.client import FleetClient
from fleetdash.config import FleetConfig
from fleetdash.credentials import FileCredentialStore
from fleetdash.exceptions import FleetError
from fleetdash.models.vehicle import Vehicle
from fleetdash.routing import DASHBOARD_PATH, LOGIN_PATH, RedirectTo, guard_path
from fleetdash.session import SessionManager
from fleetdash.views import MSG_NO_LOGS, MSG_NO_VEHICLES, DashboardView, LoginView, VehicleDetailView

_logger = logging.getLogger("fleetdash")

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_REDIRECT = 2

Command = Callable[[argparse.Namespace, FleetClient, SessionManager], Awaitable[int]]


def _emit(args: argparse.Namespace, payload: Any, lines: list[str]) -> None:
    if args.json_mode:
        print(json.dumps(payload, indent=2, default=str))
    else:
        print("\n".join(lines))


def _guard(session: SessionManager, path: str) -> int | None:
    decision = guard_path(session.state, path)
    if isinstance(decision, RedirectTo):
        if decision.path == LOGIN_PATH:
            print(f"Not logged in. Redirecting to {decision.path} (run 'fleetdash login').", file=sys.stderr)
        else:
            print(f"No view at {path}. Redirecting to {decision.path}.", file=sys.stderr)
        return EXIT_REDIRECT
    return None


def _vehicle_line(vehicle: Vehicle) -> str:
    status = vehicle.current_status
    if status is None:
        detail = "Status: Unknown"
    else:
        battery = f"{status.battery:.1f}%" if status.battery is not None else "n/a"
        detail = f"battery {battery}, state {status.state or 'n/a'}"
    return f"  {vehicle.id:<12} {vehicle.name:<20} {vehicle.model:<16} {detail}"


async def _cmd_login(args: argparse.Namespace, client: FleetClient, session: SessionManager) -> int:
    username = args.username or os.environ.get("FLEETDASH_USERNAME") or input("Username: ")
    password = os.environ.get("FLEETDASH_PASSWORD") or getpass.getpass("Password: ")
    view = LoginView(session)
    if not await view.submit(username.strip(), password):
        print(view.error, file=sys.stderr)
        return EXIT_FAILED
    print(f"Logged in as {username}. Next: {view.next_path}")
    return EXIT_OK


async def _cmd_logout(args: argparse.Namespace, client: FleetClient, session: SessionManager) -> int:
    session.logout()
    print("Logged out.")
    return EXIT_OK


async def _cmd_status(args: argparse.Namespace, client: FleetClient, session: SessionManager) -> int:
    _emit(
        args,
        {"state": session.state.value, "api": client.config.base_url},
        [f"Session: {session.state.value}", f"API:     {client.config.base_url}"],
    )
    return EXIT_OK


async def _cmd_dashboard(args: argparse.Namespace, client: FleetClient, session: SessionManager) -> int:
    redirect = _guard(session, DASHBOARD_PATH)
    if redirect is not None:
        return redirect

    view = DashboardView(client)
    try:
        await view.activate()
    finally:
        view.deactivate()

    lines = ["Vehicles"]
    if view.vehicles.error:
        lines.append(f"  ! {view.vehicles.error}")
    elif not view.vehicles.data:
        lines.append(f"  {MSG_NO_VEHICLES}")
    else:
        lines.extend(_vehicle_line(v) for v in view.vehicles.data)

    chart = view.chart.data
    lines.append("")
    lines.append(chart.title if chart is not None else "Decision Actions")
    if view.chart.error:
        lines.append(f"  ! {view.chart.error}")
    elif chart is not None:
        for label, count, share in zip(chart.labels, chart.data, chart.shares(), strict=True):
            lines.append(f"  {label:<16} {count:>6}  {share:6.1%}")

    payload = {
        "vehicles": {
            "error": view.vehicles.error,
            "items": [v.model_dump() for v in view.vehicles.data or []],
        },
        "chart": {
            "error": view.chart.error,
            "labels": list(chart.labels) if chart else [],
            "data": list(chart.data) if chart else [],
        },
    }
    _emit(args, payload, lines)
    return EXIT_FAILED if view.vehicles.error or view.chart.error else EXIT_OK


async def _cmd_vehicle(args: argparse.Namespace, client: FleetClient, session: SessionManager) -> int:
    if not args.vehicle_id.strip():
        print("Vehicle id must not be empty.", file=sys.stderr)
        return EXIT_FAILED
    redirect = _guard(session, f"/vehicles/{quote(args.vehicle_id, safe='')}")
    if redirect is not None:
        return redirect

    view = VehicleDetailView(client, args.vehicle_id)
    try:
        await view.activate()
    finally:
        view.deactivate()

    detail = view.detail.data
    if view.detail.error or detail is None:
        print(view.detail.error, file=sys.stderr)
        return EXIT_FAILED

    lines = [f"{detail.vehicle.name} (model {detail.vehicle.model})", "", f"Decision logs ({detail.total})"]
    if not detail.logs:
        lines.append(f"  {MSG_NO_LOGS}")
    for log in detail.logs:
        when = log.timestamp_datetime
        lines.append(
            f"  {when.isoformat() if when else log.timestamp:<26} {log.decision.action:<10} "
            f"{log.decision.confidence_percent:5.1f}%  {log.decision.reason}"
        )
    payload = {
        "vehicle": detail.vehicle.model_dump(),
        "total": detail.total,
        "logs": [log.model_dump() for log in detail.logs],
    }
    _emit(args, payload, lines)
    return EXIT_OK


_COMMANDS: dict[str, Command] = {
    "login": _cmd_login,
    "logout": _cmd_logout,
    "status": _cmd_status,
    "dashboard": _cmd_dashboard,
    "vehicle": _cmd_vehicle,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fleetdash", description="Inspection fleet dashboard client.")
    parser.add_argument("--api-url", help="API base address (default: $FLEETDASH_API_URL or /api/v1)")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)
    login_parser = sub.add_parser("login", help="Sign in and store the credential")
    login_parser.add_argument("--username", "-u", help="Account name (default: $FLEETDASH_USERNAME or prompt)")
    sub.add_parser("logout", help="Forget the stored credential")
    sub.add_parser("status", help="Show the session state")
    sub.add_parser("dashboard", help="Vehicle list and decision statistics")
    vehicle_parser = sub.add_parser("vehicle", help="One vehicle with its decision logs")
    vehicle_parser.add_argument("vehicle_id")
    return parser


async def _run(args: argparse.Namespace, config: FleetConfig) -> int:
    store = FileCredentialStore(config.credentials_path)
    async with FleetClient(config, store) as client:
        session = SessionManager(store, client)
        return await _COMMANDS[args.command](args, client, session)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    overrides: dict[str, Any] = {}
    if args.api_url:
        overrides["api_url"] = args.api_url

    try:
        config = FleetConfig.from_env(**overrides)
        return asyncio.run(_run(args, config))
    except FleetError as exc:
        _logger.debug("Command failed", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_FAILED


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
