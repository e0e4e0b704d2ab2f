"""Decision log endpoints.

Endpoints:
  - GET /vehicles/{id}/decision-logs
  - GET /decision-logs
"""

from __future__ import annotations

import logging
from typing import Any

from fleetdash._api._common import json_body, parse_model, path_segment, raise_for_status
from fleetdash._constants import DECISION_LOGS_ENDPOINT, VEHICLES_ENDPOINT
from fleetdash._transport import ApiResponse, Transport
from fleetdash.exceptions import InvalidResponseError, RequestSetupError
from fleetdash.models.decision_log import DecisionLogFeed, DecisionLogPage

_logger = logging.getLogger(__name__)


def _object_body(response: ApiResponse, *, endpoint: str) -> dict[str, Any]:
    decoded = json_body(response, endpoint=endpoint)
    if decoded is None:
        return {}
    if isinstance(decoded, list):
        # Bare arrays are accepted as an unpaginated listing.
        return {"logs": decoded}
    if not isinstance(decoded, dict):
        raise InvalidResponseError(response.status, "Decision log body is not a JSON object", endpoint=endpoint)
    return decoded


def build_page_params(page: int | None, page_size: int | None) -> dict[str, str] | None:
    """Query parameters for the paginated per-vehicle listing."""
    params: dict[str, str] = {}
    if page is not None:
        if page < 1:
            raise RequestSetupError(f"page must be >= 1, got {page}")
        params["page"] = str(page)
    if page_size is not None:
        if page_size < 1:
            raise RequestSetupError(f"page_size must be >= 1, got {page_size}")
        params["pageSize"] = str(page_size)
    return params or None


async def fetch_vehicle_decision_logs(
    transport: Transport,
    vehicle_id: str,
    *,
    page: int | None = None,
    page_size: int | None = None,
) -> DecisionLogPage:
    """Fetch the decision logs recorded for one vehicle."""
    endpoint = f"{VEHICLES_ENDPOINT}/{path_segment(vehicle_id, what='vehicle id')}{DECISION_LOGS_ENDPOINT}"
    response = await transport.request("GET", endpoint, params=build_page_params(page, page_size))
    raise_for_status(response, endpoint=endpoint)

    result = parse_model(
        DecisionLogPage,
        _object_body(response, endpoint=endpoint),
        status=response.status,
        endpoint=endpoint,
    )
    _logger.debug("Decision logs vehicle=%s count=%d total=%d", vehicle_id, len(result.logs), result.total)
    return result


async def fetch_all_decision_logs(transport: Transport) -> DecisionLogFeed:
    """Fetch the decision logs of the whole fleet."""
    response = await transport.request("GET", DECISION_LOGS_ENDPOINT)
    raise_for_status(response, endpoint=DECISION_LOGS_ENDPOINT)

    result = parse_model(
        DecisionLogFeed,
        _object_body(response, endpoint=DECISION_LOGS_ENDPOINT),
        status=response.status,
        endpoint=DECISION_LOGS_ENDPOINT,
    )
    _logger.debug("Decision logs fleet-wide count=%d", len(result.logs))
    return result
