from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import pytest

from fleetdash._api import decision_logs as logs_api
from fleetdash._api import login as login_api
from fleetdash._api import vehicles as vehicles_api
from fleetdash._transport import ApiResponse
from fleetdash.exceptions import (
    AuthenticationError,
    InvalidResponseError,
    NotFoundError,
    RequestSetupError,
    ServerError,
)


@dataclass
class ScriptedTransport:
    """Answers every request with the same canned response."""

    response: ApiResponse
    calls: list[tuple[str, str, Any, Any]] = field(default_factory=list)

    async def request(
        self,
        method: str,
        endpoint: str,
        *,
        json_body: Mapping[str, Any] | None = None,
        params: Mapping[str, str] | None = None,
    ) -> ApiResponse:
        self.calls.append((method, endpoint, json_body, params))
        return self.response


def _json(status: int, body: Any) -> ApiResponse:
    return ApiResponse(status=status, body=body, text="<json>")


# ------------------------------------------------------------------
# Login
# ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_login_posts_credentials_and_returns_token() -> None:
    transport = ScriptedTransport(_json(200, {"token": "abc"}))

    token = await login_api.login(transport, "alice", "correct")

    assert token.token == "abc"
    assert transport.calls == [("POST", "/auth/login", {"username": "alice", "password": "correct"}, None)]


@pytest.mark.parametrize("status", [400, 401, 403])
def test_login_rejections_are_authentication_errors(status: int) -> None:
    with pytest.raises(AuthenticationError) as exc_info:
        login_api.parse_login_response(_json(status, {"error": "invalid credentials"}))
    assert exc_info.value.status == status
    assert exc_info.value.message == "invalid credentials"


def test_login_rejection_without_message() -> None:
    with pytest.raises(AuthenticationError) as exc_info:
        login_api.parse_login_response(ApiResponse(status=401, body=None, text=""))
    assert exc_info.value.message is None


def test_login_server_failure_is_plain_server_error() -> None:
    with pytest.raises(ServerError) as exc_info:
        login_api.parse_login_response(_json(500, {"error": "could not generate token"}))
    assert type(exc_info.value) is ServerError
    assert exc_info.value.message == "could not generate token"


@pytest.mark.parametrize("body", [{}, {"token": ""}, {"token": 12}, ["abc"]])
def test_login_success_without_token_is_invalid(body: Any) -> None:
    with pytest.raises(InvalidResponseError):
        login_api.parse_login_response(_json(200, body))


# ------------------------------------------------------------------
# Vehicles
# ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_vehicle_list_skips_non_objects() -> None:
    transport = ScriptedTransport(_json(200, [{"id": "V-001"}, "junk", {"id": "V-002"}]))
    vehicles = await vehicles_api.fetch_vehicle_list(transport)
    assert [v.id for v in vehicles] == ["V-001", "V-002"]


@pytest.mark.asyncio
async def test_vehicle_list_null_body_is_empty() -> None:
    transport = ScriptedTransport(ApiResponse(status=200, body=None, text="null"))
    assert await vehicles_api.fetch_vehicle_list(transport) == []


@pytest.mark.asyncio
async def test_vehicle_list_rejects_object_body() -> None:
    transport = ScriptedTransport(_json(200, {"vehicles": []}))
    with pytest.raises(InvalidResponseError):
        await vehicles_api.fetch_vehicle_list(transport)


@pytest.mark.asyncio
async def test_vehicle_list_rejects_non_json_body() -> None:
    transport = ScriptedTransport(ApiResponse(status=200, body=None, text="<html>gateway</html>"))
    with pytest.raises(InvalidResponseError):
        await vehicles_api.fetch_vehicle_list(transport)


@pytest.mark.asyncio
async def test_get_vehicle_encodes_id() -> None:
    transport = ScriptedTransport(_json(200, {"id": "A/B 1"}))
    vehicle = await vehicles_api.fetch_vehicle(transport, "A/B 1")
    assert vehicle.id == "A/B 1"
    assert transport.calls[0][1] == "/vehicles/A%2FB%201"


@pytest.mark.asyncio
async def test_get_vehicle_404_is_not_found() -> None:
    transport = ScriptedTransport(_json(404, {"error": "vehicle with the specified ID was not found"}))
    with pytest.raises(NotFoundError) as exc_info:
        await vehicles_api.fetch_vehicle(transport, "V-404")
    assert exc_info.value.status == 404


@pytest.mark.asyncio
async def test_get_vehicle_null_body_is_not_found() -> None:
    transport = ScriptedTransport(ApiResponse(status=200, body=None, text="null"))
    with pytest.raises(NotFoundError):
        await vehicles_api.fetch_vehicle(transport, "V-001")


@pytest.mark.asyncio
async def test_get_vehicle_empty_id_is_setup_error() -> None:
    transport = ScriptedTransport(_json(200, {}))
    with pytest.raises(RequestSetupError):
        await vehicles_api.fetch_vehicle(transport, "  ")
    assert transport.calls == []


# ------------------------------------------------------------------
# Decision logs
# ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_vehicle_logs_send_page_params() -> None:
    transport = ScriptedTransport(
        _json(200, {"data": [], "pagination": {"total": 12, "page": 2, "pageSize": 5, "totalPages": 3}})
    )

    page = await logs_api.fetch_vehicle_decision_logs(transport, "V-001", page=2, page_size=5)

    assert transport.calls[0][1] == "/vehicles/V-001/decision-logs"
    assert transport.calls[0][3] == {"page": "2", "pageSize": "5"}
    assert page.total == 12
    assert page.page == 2


@pytest.mark.asyncio
async def test_vehicle_logs_without_paging_sends_no_params() -> None:
    transport = ScriptedTransport(_json(200, {"logs": [{"id": "L-1"}], "total": 1}))
    page = await logs_api.fetch_vehicle_decision_logs(transport, "V-001")
    assert transport.calls[0][3] is None
    assert [log.id for log in page.logs] == ["L-1"]


@pytest.mark.asyncio
async def test_vehicle_logs_accept_bare_array() -> None:
    transport = ScriptedTransport(_json(200, [{"id": "L-1"}, {"id": "L-2"}]))
    page = await logs_api.fetch_vehicle_decision_logs(transport, "V-001")
    assert page.total == 2


@pytest.mark.parametrize(("page", "page_size"), [(0, None), (None, 0), (-1, 10)])
def test_page_params_must_be_positive(page: int | None, page_size: int | None) -> None:
    with pytest.raises(RequestSetupError):
        logs_api.build_page_params(page, page_size)


@pytest.mark.asyncio
async def test_vehicle_logs_with_malformed_entries_are_invalid() -> None:
    transport = ScriptedTransport(_json(200, {"logs": "nope"}))
    with pytest.raises(InvalidResponseError):
        await logs_api.fetch_vehicle_decision_logs(transport, "V-001")


@pytest.mark.asyncio
async def test_all_logs_server_error_carries_message() -> None:
    transport = ScriptedTransport(_json(500, {"error": "failed to retrieve decision logs"}))
    with pytest.raises(ServerError) as exc_info:
        await logs_api.fetch_all_decision_logs(transport)
    assert exc_info.value.status == 500
    assert exc_info.value.message == "failed to retrieve decision logs"
