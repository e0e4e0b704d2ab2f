"""Vehicle and telemetry status models."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, Field, field_validator

from fleetdash.models._base import FleetBaseModel, parse_epoch, safe_float, safe_int, safe_str


class Position(FleetBaseModel):
    """Geographic position of a vehicle."""

    lat: float = Field(default=0.0, validation_alias=AliasChoices("lat", "latitude"))
    lng: float = Field(default=0.0, validation_alias=AliasChoices("lng", "lon", "longitude"))

    @field_validator("lat", "lng", mode="before")
    @classmethod
    def _coerce_floats(cls, value: Any) -> float:
        parsed = safe_float(value)
        return 0.0 if parsed is None else parsed


class VehicleStatus(FleetBaseModel):
    """Latest status reported by a vehicle.

    Parameters
    ----------
    timestamp : int or None
        Epoch timestamp of the report (seconds or milliseconds).
    position : Position
        Reported location.
    battery : float or None
        Battery level in percent, expected within ``0..100``.
    state : str
        Free-form vehicle state (e.g. ``"patrolling"``).
    """

    timestamp: int | None = Field(default=None, validation_alias=AliasChoices("timestamp", "time"))
    position: Position = Field(default_factory=Position)
    battery: float | None = Field(default=None, validation_alias=AliasChoices("battery", "battery_level"))
    state: str = Field(default="", validation_alias=AliasChoices("state", "status"))

    @field_validator("timestamp", mode="before")
    @classmethod
    def _coerce_timestamp(cls, value: Any) -> int | None:
        return safe_int(value)

    @field_validator("battery", mode="before")
    @classmethod
    def _coerce_battery(cls, value: Any) -> float | None:
        return safe_float(value)

    @field_validator("state", mode="before")
    @classmethod
    def _coerce_state(cls, value: Any) -> str:
        return safe_str(value)

    @property
    def reported_at(self) -> datetime | None:
        """``timestamp`` as a UTC datetime."""
        return parse_epoch(self.timestamp)

    @property
    def battery_in_range(self) -> bool:
        """Whether the battery reading is a plausible percentage."""
        return self.battery is not None and 0.0 <= self.battery <= 100.0


class Vehicle(FleetBaseModel):
    """A vehicle of the monitored fleet.

    ``current_status`` is ``None`` for vehicles that have never reported.
    """

    id: str = ""
    name: str = ""
    model: str = ""
    current_status: VehicleStatus | None = Field(
        default=None,
        validation_alias=AliasChoices("current_status", "currentStatus"),
    )

    @field_validator("id", "name", "model", mode="before")
    @classmethod
    def _coerce_strings(cls, value: Any) -> str:
        return safe_str(value)

    @property
    def has_status(self) -> bool:
        return self.current_status is not None
