"""Login endpoint.

Endpoint:
  - POST /auth/login
"""

from __future__ import annotations

import logging
from typing import Any

from fleetdash._api._common import json_body, raise_for_status, server_message
from fleetdash._constants import AUTH_REJECTED_STATUSES, LOGIN_ENDPOINT
from fleetdash._redact import redact_for_log
from fleetdash._transport import ApiResponse, Transport
from fleetdash.exceptions import AuthenticationError, InvalidResponseError
from fleetdash.models.token import AuthToken

_logger = logging.getLogger(__name__)


def build_login_request(username: str, password: str) -> dict[str, str]:
    """Build the JSON body for the login endpoint."""
    return {"username": username, "password": password}


def parse_login_response(response: ApiResponse) -> AuthToken:
    """Parse the login response and extract the bearer token.

    Raises
    ------
    AuthenticationError
        The backend rejected the credentials.
    ServerError
        Any other error status.
    InvalidResponseError
        A success response without a token.
    """
    if response.status in AUTH_REJECTED_STATUSES:
        raise AuthenticationError(
            response.status,
            server_message(response.body),
            endpoint=LOGIN_ENDPOINT,
        )
    raise_for_status(response, endpoint=LOGIN_ENDPOINT)

    body = json_body(response, endpoint=LOGIN_ENDPOINT)
    _logger.debug("Login response decoded parsed=%s", redact_for_log(body))
    token = body.get("token") if isinstance(body, dict) else None
    if not isinstance(token, str) or not token.strip():
        raise InvalidResponseError(
            response.status,
            "Login response missing token",
            endpoint=LOGIN_ENDPOINT,
        )

    raw: dict[str, Any] = dict(body) if isinstance(body, dict) else {}
    return AuthToken(token=token, raw=raw)


async def login(transport: Transport, username: str, password: str) -> AuthToken:
    """Exchange username and password for a bearer token."""
    response = await transport.request(
        "POST",
        LOGIN_ENDPOINT,
        json_body=build_login_request(username, password),
    )
    return parse_login_response(response)
