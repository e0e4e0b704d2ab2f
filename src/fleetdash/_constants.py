"""Internal constants shared across the library."""

DEFAULT_API_URL = "/api/v1"
DEFAULT_ORIGIN = "http://localhost:8080"
USER_AGENT = "fleetdash/1"

#: Key the bearer credential is persisted under.
TOKEN_STORAGE_KEY = "jwt_token"

LOGIN_ENDPOINT = "/auth/login"
VEHICLES_ENDPOINT = "/vehicles"
DECISION_LOGS_ENDPOINT = "/decision-logs"

#: Status codes ``/auth/login`` answers with for rejected credentials.
AUTH_REJECTED_STATUSES: frozenset[int] = frozenset({400, 401, 403})
