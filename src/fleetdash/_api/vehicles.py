"""Vehicle endpoints.

Endpoints:
  - GET /vehicles
  - GET /vehicles/{id}
"""

from __future__ import annotations

import logging

from fleetdash._api._common import json_body, parse_model, path_segment, raise_for_status
from fleetdash._constants import VEHICLES_ENDPOINT
from fleetdash._transport import Transport
from fleetdash.exceptions import InvalidResponseError, NotFoundError
from fleetdash.models.vehicle import Vehicle

_logger = logging.getLogger(__name__)


async def fetch_vehicle_list(transport: Transport) -> list[Vehicle]:
    """Fetch every vehicle of the fleet."""
    response = await transport.request("GET", VEHICLES_ENDPOINT)
    raise_for_status(response, endpoint=VEHICLES_ENDPOINT)

    decoded = json_body(response, endpoint=VEHICLES_ENDPOINT)
    if decoded is None:
        return []
    if not isinstance(decoded, list):
        raise InvalidResponseError(response.status, "Vehicle list is not a JSON array", endpoint=VEHICLES_ENDPOINT)

    _logger.debug("Vehicle list response decoded count=%d", len(decoded))
    return [
        parse_model(Vehicle, item, status=response.status, endpoint=VEHICLES_ENDPOINT)
        for item in decoded
        if isinstance(item, dict)
    ]


async def fetch_vehicle(transport: Transport, vehicle_id: str) -> Vehicle:
    """Fetch a single vehicle by id.

    Raises
    ------
    NotFoundError
        The backend answered 404 or an empty body.
    """
    endpoint = f"{VEHICLES_ENDPOINT}/{path_segment(vehicle_id, what='vehicle id')}"
    response = await transport.request("GET", endpoint)
    raise_for_status(response, endpoint=endpoint)

    decoded = json_body(response, endpoint=endpoint)
    if decoded is None:
        raise NotFoundError(response.status, f"vehicle {vehicle_id} not found", endpoint=endpoint)
    if not isinstance(decoded, dict):
        raise InvalidResponseError(response.status, "Vehicle is not a JSON object", endpoint=endpoint)
    return parse_model(Vehicle, decoded, status=response.status, endpoint=endpoint)
