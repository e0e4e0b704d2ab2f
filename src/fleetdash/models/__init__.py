"""Data models for fleet API responses."""

from fleetdash.models._base import FleetBaseModel, FleetEnum, parse_epoch, parse_iso_timestamp
from fleetdash.models.decision_log import (
    DecisionAction,
    DecisionLog,
    DecisionLogFeed,
    DecisionLogPage,
    ServerDecision,
)
from fleetdash.models.token import AuthToken
from fleetdash.models.vehicle import Position, Vehicle, VehicleStatus

__all__ = [
    "AuthToken",
    "DecisionAction",
    "DecisionLog",
    "DecisionLogFeed",
    "DecisionLogPage",
    "FleetBaseModel",
    "FleetEnum",
    "Position",
    "ServerDecision",
    "Vehicle",
    "VehicleStatus",
    "parse_epoch",
    "parse_iso_timestamp",
]
