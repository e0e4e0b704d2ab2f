"""fleetdash - Async session and data client for the inspection fleet dashboard."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("fleetdash")
except PackageNotFoundError:
    __version__ = "0+local"
from fleetdash.client import FleetClient
from fleetdash.config import FleetConfig
from fleetdash.credentials import CredentialStore, FileCredentialStore, MemoryCredentialStore
from fleetdash.exceptions import (
    AuthenticationError,
    CredentialStoreError,
    FleetConfigError,
    FleetError,
    InvalidResponseError,
    NetworkUnreachableError,
    NotFoundError,
    RequestSetupError,
    ServerError,
)
from fleetdash.models import (
    AuthToken,
    DecisionAction,
    DecisionLog,
    DecisionLogFeed,
    DecisionLogPage,
    Position,
    ServerDecision,
    Vehicle,
    VehicleStatus,
)
from fleetdash.routing import Allow, RedirectTo, allow, guard_path
from fleetdash.session import Session, SessionManager, SessionState
from fleetdash.stats import ActionCounts, ChartSeries, aggregate, to_chart_series

__all__ = [
    "__version__",
    "ActionCounts",
    "Allow",
    "AuthToken",
    "AuthenticationError",
    "ChartSeries",
    "CredentialStore",
    "CredentialStoreError",
    "DecisionAction",
    "DecisionLog",
    "DecisionLogFeed",
    "DecisionLogPage",
    "FileCredentialStore",
    "FleetClient",
    "FleetConfig",
    "FleetConfigError",
    "FleetError",
    "InvalidResponseError",
    "MemoryCredentialStore",
    "NetworkUnreachableError",
    "NotFoundError",
    "Position",
    "RedirectTo",
    "RequestSetupError",
    "ServerDecision",
    "ServerError",
    "Session",
    "SessionManager",
    "SessionState",
    "Vehicle",
    "VehicleStatus",
    "aggregate",
    "allow",
    "guard_path",
    "to_chart_series",
]
