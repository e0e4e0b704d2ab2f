"""Custom exception hierarchy for fleetdash."""

from __future__ import annotations


class FleetError(Exception):
    """Base exception for all fleetdash errors."""


class FleetConfigError(FleetError):
    """Invalid or missing configuration."""


class CredentialStoreError(FleetError):
    """The persisted credential could not be read or written."""


class RequestSetupError(FleetError):
    """Failure before the request left the client (bad URL, bad body, no session)."""

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.message = message
        self.endpoint = endpoint
        super().__init__(message)


class NetworkUnreachableError(FleetError):
    """The request was sent but no response came back."""

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.endpoint = endpoint
        super().__init__(message)


class ServerError(FleetError):
    """The backend answered with an error status.

    Parameters
    ----------
    status : int
        HTTP status code of the response.
    message : str or None
        Server-supplied error message (the ``error`` key of the JSON body),
        ``None`` when the body carried none.
    endpoint : str
        API path the request was sent to.
    """

    def __init__(
        self,
        status: int,
        message: str | None = None,
        *,
        endpoint: str = "",
    ) -> None:
        self.status = status
        self.message = message
        self.endpoint = endpoint
        detail = f": {message}" if message else ""
        super().__init__(f"HTTP {status} from {endpoint or '<unknown>'}{detail}")


class AuthenticationError(ServerError):
    """Login rejected by the backend (invalid username or password)."""


class NotFoundError(ServerError):
    """The requested resource does not exist."""


class InvalidResponseError(ServerError):
    """A success response whose body is not the JSON shape the endpoint promises."""
