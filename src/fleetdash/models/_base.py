"""Base model, enum and coercion helpers for fleet API responses.

Every response model inherits from :class:`FleetBaseModel`, which

* is frozen (responses are read-only projections),
* ignores unknown keys,
* accepts both the field name and any declared alias, and
* stashes the original payload dict in ``raw``.

Categorical string values inherit from :class:`FleetEnum`, which resolves
any unmapped value to ``UNKNOWN`` instead of raising.
"""

from __future__ import annotations

import enum
import math
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Threshold to distinguish epoch seconds from milliseconds.
_MS_THRESHOLD = 1_000_000_000_000


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result):
        return None
    return result


def safe_int(value: Any) -> int | None:
    parsed = safe_float(value)
    if parsed is None or math.isinf(parsed):
        return None
    return int(parsed)


def safe_str(value: Any) -> str:
    """Coerce ids and labels to strings; ``None`` becomes ``""``."""
    if value is None:
        return ""
    return str(value)


def parse_epoch(value: int | float | None) -> datetime | None:
    """Convert an epoch timestamp (seconds **or** milliseconds) to a UTC datetime."""
    if value is None:
        return None
    ts = int(value)
    if ts >= _MS_THRESHOLD:
        ts = ts // 1000
    try:
        return datetime.fromtimestamp(ts, tz=UTC)
    except (OverflowError, OSError, ValueError):
        return None


def parse_iso_timestamp(value: str) -> datetime | None:
    """Parse an ISO-8601-ish timestamp; ``None`` when it cannot be read."""
    text = value.strip()
    if not text:
        return None
    if " " in text and "T" not in text:
        text = text.replace(" ", "T", 1)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed


class FleetEnum(enum.StrEnum):
    """Base for categorical string values sent by the backend.

    Every subclass **must** define ``UNKNOWN``.
    """

    @classmethod
    def _missing_(cls, value: object) -> FleetEnum:
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value == normalized:
                    return member
        unknown: FleetEnum = cls["UNKNOWN"]
        return unknown


class FleetBaseModel(BaseModel):
    """Base for fleet API response models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict, repr=False, exclude=True)
    """Original API payload."""

    @model_validator(mode="before")
    @classmethod
    def _ensure_raw(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        merged = dict(values)
        merged.setdefault("raw", dict(values))
        return merged
