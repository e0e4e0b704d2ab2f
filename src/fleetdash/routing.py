"""Route guard deciding whether a view may render.

Everything here is pure: no I/O, no caching. Callers evaluate the guard on
every navigation attempt with the current session state.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from fleetdash.session import SessionState

LOGIN_PATH = "/login"
DASHBOARD_PATH = "/dashboard"


@dataclass(frozen=True, slots=True)
class Allow:
    """Render the requested view."""


@dataclass(frozen=True, slots=True)
class RedirectTo:
    """Navigate to ``path`` instead of rendering the requested view."""

    path: str


Decision = Allow | RedirectTo

ALLOW = Allow()


def allow(state: SessionState, target_is_protected: bool) -> Decision:
    """Decide whether a target may render for the given session state."""
    if not target_is_protected:
        return ALLOW
    if state is SessionState.AUTHENTICATED:
        return ALLOW
    return RedirectTo(LOGIN_PATH)


@dataclass(frozen=True, slots=True)
class Route:
    """A view path pattern; ``{name}`` matches one path segment."""

    name: str
    pattern: str
    protected: bool

    def _regex(self) -> re.Pattern[str]:
        parts = re.split(r"(\{[^/{}]+\})", self.pattern)
        body = "".join(
            f"(?P<{part[1:-1]}>[^/]+)" if part.startswith("{") else re.escape(part) for part in parts
        )
        return re.compile(f"^{body}/?$")

    def match(self, path: str) -> dict[str, str] | None:
        found = self._regex().match(path)
        return found.groupdict() if found else None


ROUTES: tuple[Route, ...] = (
    Route("login", LOGIN_PATH, protected=False),
    Route("dashboard", DASHBOARD_PATH, protected=True),
    Route("vehicle_detail", "/vehicles/{id}", protected=True),
)


def find_route(path: str, routes: tuple[Route, ...] = ROUTES) -> tuple[Route, dict[str, str]] | None:
    """Return the first route matching *path* with its captured parameters."""
    clean = path.split("?", 1)[0].split("#", 1)[0] or "/"
    for route in routes:
        params = route.match(clean)
        if params is not None:
            return route, params
    return None


def landing_path(state: SessionState) -> str:
    """Where ``/`` and unknown paths lead."""
    return DASHBOARD_PATH if state is SessionState.AUTHENTICATED else LOGIN_PATH


def guard_path(state: SessionState, path: str, routes: tuple[Route, ...] = ROUTES) -> Decision:
    """Resolve a concrete path against the route table and guard it.

    Paths matching no route (including ``/``) redirect to the landing path
    for the current state.
    """
    found = find_route(path, routes)
    if found is None:
        return RedirectTo(landing_path(state))
    route, _params = found
    return allow(state, route.protected)
