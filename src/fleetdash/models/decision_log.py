"""Decision log models."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, Field, field_validator, model_validator

from fleetdash.models._base import FleetBaseModel, FleetEnum, parse_iso_timestamp, safe_float, safe_int, safe_str


class DecisionAction(FleetEnum):
    """Known decision action labels."""

    PICKUP = "pickup"
    SKIP = "skip"
    UNKNOWN = "unknown"


class ServerDecision(FleetBaseModel):
    """The automated decision taken for one captured image.

    ``action`` keeps the label exactly as the backend sent it so that
    aggregation never merges distinct labels; ``action_kind`` maps it onto
    :class:`DecisionAction`.
    """

    image_id: str = Field(default="", validation_alias=AliasChoices("image_id", "imageId"))
    action: str = ""
    confidence: float = 0.0
    reason: str = ""

    @field_validator("image_id", "action", "reason", mode="before")
    @classmethod
    def _coerce_strings(cls, value: Any) -> str:
        return safe_str(value)

    @field_validator("confidence", mode="before")
    @classmethod
    def _coerce_confidence(cls, value: Any) -> float:
        parsed = safe_float(value)
        return 0.0 if parsed is None else parsed

    @property
    def action_kind(self) -> DecisionAction:
        return DecisionAction(self.action)

    @property
    def confidence_percent(self) -> float:
        return round(self.confidence * 100, 1)


class DecisionLog(FleetBaseModel):
    """One decision event recorded for a vehicle."""

    id: str = ""
    vehicle_id: str = Field(default="", validation_alias=AliasChoices("vehicle_id", "vehicleId"))
    timestamp: str = ""
    image_url: str = Field(default="", validation_alias=AliasChoices("image_url", "imageUrl"))
    decision: ServerDecision = Field(
        default_factory=ServerDecision,
        validation_alias=AliasChoices("server_decision", "decision", "serverDecision"),
    )

    @field_validator("id", "vehicle_id", "timestamp", "image_url", mode="before")
    @classmethod
    def _coerce_strings(cls, value: Any) -> str:
        return safe_str(value)

    @field_validator("decision", mode="before")
    @classmethod
    def _default_decision(cls, value: Any) -> Any:
        return {} if value is None else value

    @property
    def timestamp_datetime(self) -> datetime | None:
        return parse_iso_timestamp(self.timestamp)


def _log_items(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    raise ValueError("logs must be a list")


class DecisionLogFeed(FleetBaseModel):
    """Fleet-wide decision log listing (``GET /decision-logs``)."""

    logs: list[DecisionLog] = Field(default_factory=list, validation_alias=AliasChoices("logs", "data"))

    @field_validator("logs", mode="before")
    @classmethod
    def _null_logs(cls, value: Any) -> list[Any]:
        return _log_items(value)


class DecisionLogPage(FleetBaseModel):
    """Decision logs of one vehicle (``GET /vehicles/{id}/decision-logs``).

    The backend answers either ``{"logs": [...], "total": n}`` or the
    paginated ``{"data": [...], "pagination": {"total": n, "page": p,
    "pageSize": s}}``; both decode to the same model. ``total`` falls back
    to the number of logs when the body does not carry one.
    """

    logs: list[DecisionLog] = Field(default_factory=list, validation_alias=AliasChoices("logs", "data"))
    total: int = 0
    page: int | None = None
    page_size: int | None = Field(default=None, validation_alias=AliasChoices("page_size", "pageSize"))

    @model_validator(mode="before")
    @classmethod
    def _flatten_pagination(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        merged = dict(values)
        pagination = merged.pop("pagination", None)
        if isinstance(pagination, dict):
            for key in ("total", "page", "pageSize", "page_size"):
                if key in pagination and key not in merged:
                    merged[key] = pagination[key]
        if merged.get("total") is None:
            items = merged.get("logs", merged.get("data"))
            merged["total"] = len(items) if isinstance(items, list) else 0
        return merged

    @field_validator("logs", mode="before")
    @classmethod
    def _null_logs(cls, value: Any) -> list[Any]:
        return _log_items(value)

    @field_validator("total", mode="before")
    @classmethod
    def _coerce_total(cls, value: Any) -> int:
        parsed = safe_int(value)
        return 0 if parsed is None or parsed < 0 else parsed

    @field_validator("page", "page_size", mode="before")
    @classmethod
    def _coerce_paging(cls, value: Any) -> int | None:
        return safe_int(value)
