from __future__ import annotations

import pytest

from fleetdash.routing import (
    ALLOW,
    DASHBOARD_PATH,
    LOGIN_PATH,
    RedirectTo,
    allow,
    find_route,
    guard_path,
    landing_path,
)
from fleetdash.session import SessionState


@pytest.mark.parametrize("state", list(SessionState))
def test_public_targets_always_render(state: SessionState) -> None:
    assert allow(state, target_is_protected=False) == ALLOW


def test_protected_target_requires_authentication() -> None:
    assert allow(SessionState.AUTHENTICATED, target_is_protected=True) == ALLOW
    assert allow(SessionState.UNAUTHENTICATED, target_is_protected=True) == RedirectTo(LOGIN_PATH)


def test_find_route_captures_vehicle_id() -> None:
    found = find_route("/vehicles/V-001?tab=logs")
    assert found is not None
    route, params = found
    assert route.name == "vehicle_detail"
    assert params == {"id": "V-001"}


def test_find_route_does_not_match_nested_paths() -> None:
    assert find_route("/vehicles/V-001/extra") is None
    assert find_route("/vehicles/") is None


@pytest.mark.parametrize("path", ["/dashboard", "/vehicles/V-001"])
def test_guard_path_redirects_protected_views_to_login(path: str) -> None:
    assert guard_path(SessionState.UNAUTHENTICATED, path) == RedirectTo(LOGIN_PATH)
    assert guard_path(SessionState.AUTHENTICATED, path) == ALLOW


def test_login_view_is_reachable_in_either_state() -> None:
    assert guard_path(SessionState.UNAUTHENTICATED, LOGIN_PATH) == ALLOW
    assert guard_path(SessionState.AUTHENTICATED, LOGIN_PATH) == ALLOW


@pytest.mark.parametrize("path", ["/", "", "/settings", "/vehicles"])
def test_unknown_paths_fall_back_to_landing(path: str) -> None:
    assert guard_path(SessionState.AUTHENTICATED, path) == RedirectTo(DASHBOARD_PATH)
    assert guard_path(SessionState.UNAUTHENTICATED, path) == RedirectTo(LOGIN_PATH)


def test_landing_path() -> None:
    assert landing_path(SessionState.AUTHENTICATED) == DASHBOARD_PATH
    assert landing_path(SessionState.UNAUTHENTICATED) == LOGIN_PATH
